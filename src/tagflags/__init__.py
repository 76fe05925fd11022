"""
tagflags - Command-line flags declared by annotating the fields of a record.

This package binds command-line arguments straight onto the fields of a
configuration record. Flag names, types, defaults and help text come from the
field declarations and an annotation string per field, so no flag has to be
declared imperatively. Parsing is done by argparse; values can also be loaded
from YAML or JSON files.
"""

from .annotation import ParsedAnnotation, parse_annotation
from .errors import (
    AmbiguousBooleanError,
    ArgumentParseError,
    RecordTypeError,
    TagFlagError,
)
from .parser import FlagRegistration, TagFlagParser, parse, safe_parse

__version__ = "1.0.0"
__all__ = [
    "AmbiguousBooleanError",
    "ArgumentParseError",
    "FlagRegistration",
    "ParsedAnnotation",
    "RecordTypeError",
    "TagFlagError",
    "TagFlagParser",
    "parse",
    "parse_annotation",
    "safe_parse",
]
