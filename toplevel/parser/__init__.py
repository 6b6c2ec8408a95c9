"""
toplevel command-line parsing
"""

from .arg_parser import parse, ScanState
from .meta_args import expand_meta_args, split_meta_line
from .switches import SWITCHES, SwitchSpec, SwitchRole, lookup_switch

__all__ = [
    'parse',
    'ScanState',
    'expand_meta_args',
    'split_meta_line',
    'SWITCHES',
    'SwitchSpec',
    'SwitchRole',
    'lookup_switch'
]
