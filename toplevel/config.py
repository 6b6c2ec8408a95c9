"""
Launcher configuration

Settings come from an optional JSON file in the home directory
(``~/.toplevel.json``), overridden by environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".toplevel.json"
HISTORY_FILE_NAME = ".toplevel_history"
LIB_PATH_VAR = "TOPLEVEL_LIB_PATH"
LOG_LEVEL_VAR = "TOPLEVEL_LOG_LEVEL"
QUIET_LOADS_VAR = "TOPLEVEL_QUIET_LOADS"
TRUE_VALUES = ("1", "true", "yes", "on")
DEFAULT_LOG_LEVEL = "WARNING"


def home_directory(environ: Optional[Mapping[str, str]] = None) -> str:
    """Home directory from HOME, falling back to / with a warning"""
    environ = os.environ if environ is None else environ
    home = environ.get("HOME")
    if not home:
        logger.warning("HOME is not set; using / as the home directory")
        return "/"
    return home


def default_library_path() -> List[str]:
    """Library directories used when nothing else is configured"""
    return [".", "./lib"]


@dataclass
class LauncherConfig:
    """Settings for one launcher run"""
    home: str = "/"
    library_path: List[str] = field(default_factory=default_library_path)
    log_level: str = DEFAULT_LOG_LEVEL
    history_file: Optional[str] = None
    quiet_loads: bool = False  # No "Loading ..." messages at all

    def __post_init__(self):
        if self.history_file is None:
            self.history_file = os.path.join(self.home, HISTORY_FILE_NAME)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'LauncherConfig':
        """Build a configuration from the config file and environment"""
        environ = os.environ if environ is None else environ
        home = home_directory(environ)
        settings = load_config_file(os.path.join(home, CONFIG_FILE_NAME))

        if environ.get(LIB_PATH_VAR):
            settings["library_path"] = [d for d in environ[LIB_PATH_VAR].split(os.pathsep) if d]
        if environ.get(LOG_LEVEL_VAR):
            settings["log_level"] = environ[LOG_LEVEL_VAR]
        if environ.get(QUIET_LOADS_VAR):
            settings["quiet_loads"] = environ[QUIET_LOADS_VAR].lower() in TRUE_VALUES

        return cls(home=home, **settings)


def load_config_file(path: str) -> Dict[str, Any]:
    """Read the known keys of a JSON config file; a missing file is empty"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    settings = {}
    if "library_path" in data:
        library_path = data["library_path"]
        if not isinstance(library_path, list) or not all(isinstance(d, str) for d in library_path):
            raise ConfigError(f"library_path in {path} must be a list of strings")
        settings["library_path"] = library_path
    for key in ("log_level", "history_file"):
        if key in data:
            if not isinstance(data[key], str):
                raise ConfigError(f"{key} in {path} must be a string")
            settings[key] = data[key]
    if "quiet_loads" in data:
        if not isinstance(data["quiet_loads"], bool):
            raise ConfigError(f"quiet_loads in {path} must be true or false")
        settings["quiet_loads"] = data["quiet_loads"]

    unknown = set(data) - {"library_path", "log_level", "history_file", "quiet_loads"}
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(sorted(unknown)))
    return settings


def configure_logging(level: str = DEFAULT_LOG_LEVEL):
    """Send log records to stderr at the given level"""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        logger.warning("Unknown log level %r; using %s", level, DEFAULT_LOG_LEVEL)
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("toplevel").setLevel(numeric)
