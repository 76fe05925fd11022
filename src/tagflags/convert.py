"""
Value conversion for the scalar flag kinds.

Two flavours exist for every kind. The strict converters are handed to argparse
as ``type=`` callables and raise argparse.ArgumentTypeError on bad input. The
forgiving converter is used for annotation defaults and never fails: it falls
back to the kind's zero value (integers that only overflow are clamped instead).
"""

import argparse
import logging
import re
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_TRUE_LITERALS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_LITERALS = ("0", "f", "F", "FALSE", "false", "False")
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class FieldKind(Enum):
    """Declared type categories recognised by the binder."""

    TEXT = "str"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    ARGS = "list[str]"
    OTHER = "other"

    @property
    def is_scalar(self) -> bool:
        return self in (FieldKind.TEXT, FieldKind.BOOL, FieldKind.INT, FieldKind.FLOAT)

    @property
    def type_name(self) -> str:
        return self.value


def strict_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Accepts 1, t, T, TRUE, true, True and 0, f, F, FALSE, false, False.
    Raises argparse.ArgumentTypeError for any other string.
    """
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    raise argparse.ArgumentTypeError(
        f"Invalid boolean value: '{value}'. Must be one of: "
        + ", ".join(_TRUE_LITERALS + _FALSE_LITERALS)
    )


def strict_int(value: str) -> int:
    """Parse a base-10 signed 64-bit integer, raising ArgumentTypeError otherwise."""
    if not _INT_PATTERN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"Invalid integer value: '{value}'")
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise argparse.ArgumentTypeError(
            f"Integer value out of 64-bit range: '{value}'"
        )
    return number


def strict_float(value: str) -> float:
    """Parse a decimal floating point number, raising ArgumentTypeError otherwise."""
    if not _FLOAT_PATTERN.fullmatch(value):
        raise argparse.ArgumentTypeError(f"Invalid float value: '{value}'")
    return float(value)


def strict_text(value: str) -> str:
    return value


STRICT_CONVERTERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.TEXT: strict_text,
    FieldKind.BOOL: strict_bool,
    FieldKind.INT: strict_int,
    FieldKind.FLOAT: strict_float,
}

ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.TEXT: "",
    FieldKind.BOOL: False,
    FieldKind.INT: 0,
    FieldKind.FLOAT: 0.0,
}

METAVARS: dict[FieldKind, str] = {
    FieldKind.TEXT: "STRING",
    FieldKind.BOOL: "BOOL",
    FieldKind.INT: "INT",
    FieldKind.FLOAT: "FLOAT",
}


def convert_default(kind: FieldKind, text: str, field_name: str = "") -> Any:
    """
    Convert annotation default text into the native value for ``kind``.

    Malformed text yields the zero value for the kind and logs a warning.
    Integers that are well formed but outside the 64-bit range are clamped to
    the nearest bound.
    """
    if kind is FieldKind.INT and _INT_PATTERN.fullmatch(text):
        number = int(text)
        clamped = min(max(number, INT64_MIN), INT64_MAX)
        if clamped != number:
            logger.warning(
                "Default %r for field '%s' is out of 64-bit range, using %d",
                text,
                field_name,
                clamped,
            )
        return clamped

    try:
        return STRICT_CONVERTERS[kind](text)
    except argparse.ArgumentTypeError as e:
        zero = ZERO_VALUES[kind]
        logger.warning(
            "Ignoring default for field '%s' (%s), using %r", field_name, e, zero
        )
        return zero


def coerce_value(kind: FieldKind, value: Any, field_name: str) -> Any:
    """
    Check a value read from a config file against ``kind``.

    Native values of the right type are returned unchanged; strings are run
    through the strict converter for the kind.

    Raises:
        TypeError: If the value is neither the expected type nor a string.
        ValueError: If a string value cannot be converted.
    """
    if isinstance(value, str):
        try:
            return STRICT_CONVERTERS[kind](value)
        except argparse.ArgumentTypeError as e:
            raise ValueError(f"Field '{field_name}': {e}")

    if kind is FieldKind.BOOL:
        if isinstance(value, bool):
            return value
    elif kind is FieldKind.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            if INT64_MIN <= value <= INT64_MAX:
                return value
            raise ValueError(
                f"Field '{field_name}' expects a 64-bit int, got {value!r}"
            )
    elif kind is FieldKind.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)

    raise TypeError(
        f"Field '{field_name}' expects {kind.type_name}, "
        f"got {type(value).__name__}: {value!r}"
    )
