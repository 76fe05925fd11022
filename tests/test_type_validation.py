#!/usr/bin/env python3
"""
Tests for value conversion.

Defaults from annotations are converted forgivingly and fall back to the zero
value, while command-line and config values are validated strictly.
"""

import argparse
import logging
import math
from typing import Annotated

import pytest

from tagflags import parse
from tagflags.convert import (
    INT64_MAX,
    INT64_MIN,
    FieldKind,
    coerce_value,
    convert_default,
    strict_bool,
    strict_float,
    strict_int,
)


class BrokenDefaults:
    Count: Annotated[int, "item count | forty"] = 7
    Ratio: Annotated[float, "ratio | half"] = 9.0
    Enabled: Annotated[bool, "switch | yes"] = True
    Huge: Annotated[int, "big | 99999999999999999999"] = 0
    Tiny: Annotated[int, "small | -99999999999999999999"] = 0
    Blank: Annotated[int, "empty default |"] = 3
    Grouped: Annotated[float, "ratio | 1_000"] = 5.0


class TestStrictConverters:
    """Test suite for the converters used on command-line values."""

    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_literals(self, value):
        assert strict_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false_literals(self, value):
        assert strict_bool(value) is False

    @pytest.mark.parametrize("value", ["yes", "no", "tRUE", "", " true"])
    def test_invalid_bool(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            strict_bool(value)

    def test_int(self):
        assert strict_int("42") == 42
        assert strict_int("+7") == 7
        assert strict_int("-0012") == -12
        assert strict_int(str(INT64_MAX)) == INT64_MAX
        assert strict_int(str(INT64_MIN)) == INT64_MIN

    @pytest.mark.parametrize(
        "value", ["", "4.2", "0x10", "1_000", " 1", "forty", str(INT64_MAX + 1)]
    )
    def test_invalid_int(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            strict_int(value)

    def test_float(self):
        assert strict_float("1.5") == 1.5
        assert strict_float("-2") == -2.0
        assert strict_float("4.2e25") == 4.2e25

    @pytest.mark.parametrize(
        "value,expected",
        [(".5", 0.5), ("5.", 5.0), ("1E3", 1000.0), ("inf", math.inf), ("-Infinity", -math.inf)],
    )
    def test_float_literal_forms(self, value, expected):
        assert strict_float(value) == expected

    def test_nan(self):
        assert math.isnan(strict_float("NaN"))

    @pytest.mark.parametrize(
        "value", ["half", "1_000", " 1.5", "1.5 ", "", "1e", "\u0661\u0662", "0x1p3"]
    )
    def test_invalid_float(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            strict_float(value)


class TestForgivingDefaults:
    """Test suite for default text conversion."""

    def test_malformed_defaults_fall_back_to_zero(self):
        """Test that malformed defaults become the zero value of the type."""
        opts = parse(BrokenDefaults(), [])
        assert opts.Count == 0
        assert opts.Ratio == 0.0
        assert opts.Enabled is False
        assert opts.Blank == 0
        assert opts.Grouped == 0.0

    def test_overflowing_integers_are_clamped(self):
        """Test that out-of-range integer defaults are clamped."""
        opts = parse(BrokenDefaults(), [])
        assert opts.Huge == INT64_MAX
        assert opts.Tiny == INT64_MIN

    def test_fallback_is_logged(self, caplog):
        """Test that each fallback produces a warning."""
        with caplog.at_level(logging.WARNING, logger="tagflags"):
            parse(BrokenDefaults(), [])
        messages = [r.getMessage() for r in caplog.records]
        assert any("'Count'" in m and "forty" in m for m in messages)
        assert any("'Huge'" in m and "64-bit range" in m for m in messages)

    def test_empty_text_default_is_empty_string(self):
        """Test that an empty default for a str field is the empty string."""
        assert convert_default(FieldKind.TEXT, "", "Name") == ""

    def test_valid_defaults(self):
        assert convert_default(FieldKind.INT, "42") == 42
        assert convert_default(FieldKind.FLOAT, "0.25") == 0.25
        assert convert_default(FieldKind.BOOL, "T") is True


class TestCoerceValue:
    """Test suite for checking values read from config files."""

    def test_native_values(self):
        assert coerce_value(FieldKind.INT, 3, "Count") == 3
        assert coerce_value(FieldKind.FLOAT, 3, "Ratio") == 3.0
        assert coerce_value(FieldKind.BOOL, False, "Enabled") is False
        assert coerce_value(FieldKind.TEXT, "x", "Name") == "x"

    def test_string_values_are_converted(self):
        assert coerce_value(FieldKind.INT, "12", "Count") == 12
        assert coerce_value(FieldKind.BOOL, "true", "Enabled") is True

    def test_bad_string_raises_value_error(self):
        with pytest.raises(ValueError, match="Field 'Count'"):
            coerce_value(FieldKind.INT, "twelve", "Count")

    @pytest.mark.parametrize(
        "kind,value",
        [
            (FieldKind.INT, True),
            (FieldKind.INT, 1.5),
            (FieldKind.FLOAT, False),
            (FieldKind.BOOL, 1),
            (FieldKind.TEXT, 5),
            (FieldKind.TEXT, None),
        ],
    )
    def test_wrong_type_raises_type_error(self, kind, value):
        with pytest.raises(TypeError, match=kind.type_name):
            coerce_value(kind, value, "Field")

    def test_int_out_of_range(self):
        with pytest.raises(ValueError):
            coerce_value(FieldKind.INT, INT64_MAX + 1, "Count")
