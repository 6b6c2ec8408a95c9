"""
Meta-argument expansion

Lets a script start with

    #!/usr/local/bin/toplevel \\
    # -o utils -e main -s

The kernel runs it as ``toplevel \\ script-file arg ...``. The second line
of the script, minus a leading "# ", supplies the real switches, and the
script name is appended after them so it can serve as the argument of a
trailing ``-s``.
"""

from typing import List, Sequence

from ..errors import ArgError

META_ARG = "\\"
EXPANSION_FAILED = "Meta-argument expansion failed"

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    " ": " ",
}

SEPARATORS = " \t"


def expand_meta_args(args: Sequence[str]) -> List[str]:
    """Expand a leading meta argument, if present"""
    args = list(args)
    if not args or args[0] != META_ARG:
        return args
    if len(args) < 2:
        raise ArgError(EXPANSION_FAILED, META_ARG)

    script = args[1]
    return read_meta_line(script) + [script] + args[2:]


def read_meta_line(path: str) -> List[str]:
    """Read and split the second line of a script"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            f.readline()
            line = f.readline()
    except (OSError, UnicodeDecodeError):
        raise ArgError(EXPANSION_FAILED, META_ARG, path) from None

    if not line:
        raise ArgError(EXPANSION_FAILED, META_ARG, path)
    return split_meta_line(strip_comment_marker(line.rstrip("\n")))


def strip_comment_marker(line: str) -> str:
    """Drop a leading "# " so the meta line can stay a Python comment"""
    if line.startswith("#"):
        line = line[1:]
        if line.startswith(" "):
            line = line[1:]
    return line


def split_meta_line(line: str) -> List[str]:
    """Split a meta-argument line.

    Every single space or tab separates two arguments, so two separators in a
    row produce an empty argument. Backslash escapes \\\\, \\n, \\t, a quoted space
    and three-digit octal codes.
    """
    if not line:
        return []

    args = []
    current = []
    pos = 0
    while pos < len(line):
        char = line[pos]
        if char in SEPARATORS:
            args.append("".join(current))
            current = []
            pos += 1
        elif char == "\\":
            decoded, pos = _read_escape(line, pos + 1)
            current.append(decoded)
        else:
            current.append(char)
            pos += 1

    args.append("".join(current))
    return args


def _read_escape(line: str, pos: int):
    if pos >= len(line):
        raise ArgError(EXPANSION_FAILED, "trailing backslash")

    char = line[pos]
    if char in ESCAPES:
        return ESCAPES[char], pos + 1

    digits = line[pos:pos + 3]
    if len(digits) == 3 and all(d in "01234567" for d in digits):
        return chr(int(digits, 8)), pos + 3

    raise ArgError(EXPANSION_FAILED, "\\" + char)
