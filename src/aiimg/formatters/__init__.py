"""Output formatters for aiimg."""

from .default import format_default, format_sequence
from .full import format_full, format_raw_data
from .json import format_json, format_json_list, to_dict
from .quiet import format_quiet, format_quiet_list

__all__ = [
    "format_default",
    "format_full",
    "format_raw_data",
    "format_sequence",
    "format_json",
    "format_json_list",
    "format_quiet",
    "format_quiet_list",
    "to_dict",
]
