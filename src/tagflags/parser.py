"""
TagFlagParser - bind command-line flags onto the fields of a configuration record.

This module walks the annotated fields of a record instance, derives one flag per
field from its type and annotation text, registers those flags with a fresh
argparse parser and writes the parsed values straight back onto the record.
Leftover positional arguments land in the record's ``list[str]`` field, and a
usage summary is written into its ``Usage`` field.
"""

import argparse
import dataclasses
import json
import logging
import os
import sys
import typing
from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, TypeVar

import yaml
from result import Err, Ok, Result

from .annotation import ParsedAnnotation, parse_annotation
from .convert import (
    METAVARS,
    STRICT_CONVERTERS,
    ZERO_VALUES,
    FieldKind,
    coerce_value,
    convert_default,
)
from .errors import AmbiguousBooleanError, ArgumentParseError, RecordTypeError
from .fields import USAGE_FIELD, FieldDescriptor, get_usage_tag, iter_fields

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

_POSITIONAL_DEST = "__positional__"
_CONFIG_DEST = "__config__"
_AMBIGUOUS_TOKENS = ("true", "false")


@dataclass
class FlagRegistration:
    """Binding between a record field and the argparse option that feeds it."""

    field: FieldDescriptor
    description: str
    default_text: Optional[str]
    default: Any

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def kind(self) -> FieldKind:
        return self.field.kind

    @property
    def option_strings(self) -> tuple[str, str]:
        return (f"--{self.name}", f"-{self.name}")

    @property
    def help(self) -> str:
        """Help text for argparse, with '%' escaped for its formatter."""
        default_suffix = f"(default: {self.default})"
        text = (
            f"{self.description} {default_suffix}"
            if self.description
            else default_suffix
        )
        return text.replace("%", "%%")

    def usage_line(self) -> str:
        return (
            f"\n\t--{self.name}: {self.default_text or ''} <-- Default, "
            f"{self.kind.type_name} # {self.description}"
        )


class _FlagArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that can raise ArgumentParseError instead of exiting."""

    def __init__(
        self, *args: Any, raise_errors: bool = False, record_usage: str = "", **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.raise_errors = raise_errors
        self.record_usage = record_usage

    def error(self, message: str) -> typing.NoReturn:
        if self.raise_errors:
            raise ArgumentParseError(message, usage=self.record_usage)
        super().error(message)


class TagFlagParser(Generic[RecordT]):
    """
    Command-line parser driven by the annotated fields of a record instance.

    Creating the parser already inspects and mutates the record: fields whose
    annotation carries a default are set to it, and the usage field receives
    the synthesized usage text. Calling parse() then applies the command line.

    Example:
        class Options:
            Usage: Annotated[str, "demo tool"] = ""
            IQ: Annotated[int, "do not inflate | 42"] = 0
            Verbose: Annotated[bool, "chatty output | false"] = False
            Args: list[str] = []

        opts = TagFlagParser(Options()).parse(["--IQ=7", "--Verbose", "file.txt"])
        # opts.IQ == 7, opts.Verbose is True, opts.Args == ["file.txt"]
    """

    def __init__(
        self,
        record: RecordT,
        prog: Optional[str] = None,
        usage_field: str = USAGE_FIELD,
        config_flag: Optional[str] = None,
        exit_on_error: bool = True,
    ) -> None:
        """
        Bind the fields of ``record`` to a new argparse parser.

        Args:
            record: The record instance to populate. It is modified in place.
            prog: Program name used in the usage text. Defaults to sys.argv[0]
                as invoked.
            usage_field: Name of the field that receives the usage text.
            config_flag: Option string (e.g. "--config") enabling a YAML/JSON
                file of field values. Disabled when None.
            exit_on_error: When False, command-line errors raise
                ArgumentParseError or AmbiguousBooleanError instead of
                printing the usage and exiting.

        Raises:
            RecordTypeError: If ``record`` is not a mutable record instance.
            ValueError: If ``config_flag`` clashes with a field flag.
        """
        self._check_record(record)
        self.record: RecordT = record
        self.prog: str = prog if prog is not None else sys.argv[0]
        self.usage_field = usage_field
        self.config_flag = config_flag
        self.exit_on_error = exit_on_error

        self.registrations: list[FlagRegistration] = []
        self.positional_field: Optional[str] = None
        self.has_bool_flag = False

        self._bind_fields()
        self.usage: str = self._build_usage()
        self.parser: argparse.ArgumentParser = self._build_parser()

    @staticmethod
    def _check_record(record: Any) -> None:
        if isinstance(record, type):
            raise RecordTypeError(
                f"TagFlagParser needs a record instance, got the class {record.__name__}"
            )
        record_type = type(record)
        if isinstance(record, tuple):
            raise RecordTypeError(
                f"TagFlagParser cannot populate immutable {record_type.__name__}"
            )
        if (
            dataclasses.is_dataclass(record_type)
            and record_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
        ):
            raise RecordTypeError(
                f"TagFlagParser cannot populate frozen dataclass {record_type.__name__}"
            )
        if not typing.get_type_hints(record_type):
            raise RecordTypeError(
                f"TagFlagParser needs a record with annotated fields, "
                f"got {record_type.__name__}"
            )

    def _bind_fields(self) -> None:
        """Walk the record fields and register one flag per bindable field."""
        for descriptor in iter_fields(type(self.record), self.usage_field):
            if descriptor.kind is FieldKind.ARGS:
                self.positional_field = descriptor.name
                continue

            annotation = parse_annotation(descriptor.tag)
            if annotation is None:
                continue
            if not descriptor.kind.is_scalar:
                logger.debug(
                    "Ignoring field '%s' with unsupported type %r",
                    descriptor.name,
                    descriptor.hint,
                )
                continue

            self.registrations.append(self._register(descriptor, annotation))

    def _register(
        self, descriptor: FieldDescriptor, annotation: ParsedAnnotation
    ) -> FlagRegistration:
        """Resolve the default of one field and pre-seed the record with it."""
        kind = descriptor.kind
        if annotation.default is not None:
            default = convert_default(kind, annotation.default, descriptor.name)
            setattr(self.record, descriptor.name, default)
        elif hasattr(self.record, descriptor.name):
            default = getattr(self.record, descriptor.name)
        else:
            default = ZERO_VALUES[kind]
            setattr(self.record, descriptor.name, default)

        if kind is FieldKind.BOOL:
            self.has_bool_flag = True

        logger.debug(
            "Registered flag --%s (%s, default %r)",
            descriptor.name,
            kind.type_name,
            default,
        )
        return FlagRegistration(
            descriptor, annotation.description, annotation.default, default
        )

    def _build_usage(self) -> str:
        """Compose the usage text and store it on the record's usage field."""
        usage_tag = get_usage_tag(type(self.record), self.usage_field)
        lines = "".join(r.usage_line() for r in self.registrations)
        usage = f"\n Usage of {self.prog} # {usage_tag or ''}\n ARGS:{lines}"
        if usage_tag is not None:
            setattr(self.record, self.usage_field, usage)
        return usage

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = _FlagArgumentParser(
            prog=self.prog,
            usage=self.usage.replace("%", "%%"),
            conflict_handler="resolve",
            allow_abbrev=False,
            raise_errors=not self.exit_on_error,
            record_usage=self.usage,
        )

        if self.config_flag:
            for registration in self.registrations:
                if self.config_flag in registration.option_strings:
                    raise ValueError(f"Flag name conflict: {self.config_flag}")
            parser.add_argument(
                self.config_flag,
                dest=_CONFIG_DEST,
                type=str,
                default=argparse.SUPPRESS,
                metavar="FILE",
                help="Path to configuration file (YAML or JSON format)",
            )

        # SUPPRESS keeps flags that were not given out of the namespace, so
        # only fields named on the command line are written back.
        for registration in self.registrations:
            parser.add_argument(
                *registration.option_strings,
                dest=registration.name,
                type=STRICT_CONVERTERS[registration.kind],
                default=argparse.SUPPRESS,
                metavar=METAVARS[registration.kind],
                help=registration.help,
            )

        parser.add_argument(
            _POSITIONAL_DEST,
            nargs=argparse.REMAINDER,
            metavar="ARGS",
            help="Positional arguments",
        )
        return parser

    def _check_boolean_ambiguity(self, args: Sequence[str]) -> None:
        """
        Reject standalone 'true'/'false' tokens when boolean flags exist.

        Raises:
            AmbiguousBooleanError: On the first offending token.
        """
        if not self.has_bool_flag:
            return
        for token in args:
            if token.lower() in _AMBIGUOUS_TOKENS:
                raise AmbiguousBooleanError(token, usage=self.usage)

    def _normalize_bool_flags(self, args: Sequence[str]) -> list[str]:
        """
        Rewrite a bare boolean flag ``--Name`` into ``--Name=true``.

        Only tokens before the first positional argument or ``--`` are
        rewritten; the rest belong to the positional arguments untouched.
        """
        bool_options = set()
        value_options = set()
        for registration in self.registrations:
            if registration.kind is FieldKind.BOOL:
                bool_options.update(registration.option_strings)
            else:
                value_options.update(registration.option_strings)
        if self.config_flag:
            value_options.add(self.config_flag)

        normalized = list(args)
        index = 0
        while index < len(normalized):
            token = normalized[index]
            if token == "--" or token == "-" or not token.startswith("-"):
                break
            if token in bool_options:
                normalized[index] = f"{token}=true"
            elif token in value_options:
                # Skip the flag's value.
                index += 1
            index += 1
        return normalized

    def _load_config_file(self, config_path: str) -> dict[str, Any]:
        """
        Load field values from a YAML or JSON file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the file format is not supported or invalid.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        file_ext = os.path.splitext(config_path)[1].lower()

        with open(config_path, "r") as f:
            if file_ext in [".yaml", ".yml"]:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML file: {e}")
            elif file_ext == ".json":
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON file: {e}")
            else:
                raise ValueError(
                    f"Unsupported file format: {file_ext}. "
                    "Supported formats are: .yaml, .yml, .json"
                )

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration file must contain a mapping, got {type(data).__name__}"
            )
        return data

    def _apply_config_file(self, config_path: str, parsed: dict[str, Any]) -> None:
        """Set fields from the config file unless the command line names them."""
        config_data = self._load_config_file(config_path)
        logger.debug("Loaded %d value(s) from %s", len(config_data), config_path)

        for registration in self.registrations:
            name = registration.name
            if name in config_data and name not in parsed:
                value = coerce_value(registration.kind, config_data[name], name)
                setattr(self.record, name, value)

    def _collect_positional(self, positional: list[str]) -> None:
        if positional and positional[0] == "--":
            positional = positional[1:]
        if self.positional_field is None:
            if positional:
                logger.debug("Discarding %d positional argument(s)", len(positional))
            return
        setattr(self.record, self.positional_field, list(positional))

    def parse(self, args: Optional[Sequence[str]] = None) -> RecordT:
        """
        Parse the command line into the record and return it.

        Args:
            args: Arguments to parse, without the program name. If None, uses
                sys.argv[1:].

        Returns:
            The same record instance, updated in place.

        Raises:
            SystemExit: On a bad command line when exit_on_error is True.
            AmbiguousBooleanError: On a standalone boolean token when
                exit_on_error is False.
            ArgumentParseError: When argparse rejects the command line and
                exit_on_error is False.
        """
        args = list(sys.argv[1:] if args is None else args)

        try:
            self._check_boolean_ambiguity(args)
        except AmbiguousBooleanError as e:
            if self.exit_on_error:
                self.parser.error(str(e))
            raise

        parsed = vars(self.parser.parse_args(self._normalize_bool_flags(args)))
        positional = parsed.pop(_POSITIONAL_DEST, [])
        config_path = parsed.pop(_CONFIG_DEST, None)

        if config_path:
            self._apply_config_file(config_path, parsed)
        for name, value in parsed.items():
            setattr(self.record, name, value)
        self._collect_positional(positional)
        return self.record

    def safe_parse(self, args: Optional[Sequence[str]] = None) -> Result[RecordT, str]:
        """
        Parse like parse(), returning Ok(record) or Err(message).

        Argument errors only come back as Err when the parser was created with
        exit_on_error=False; otherwise argparse still exits.
        """
        try:
            return Ok(self.parse(args))
        except Exception as e:
            return Err(str(e))


def parse(
    record: RecordT, args: Optional[Sequence[str]] = None, **kwargs: Any
) -> RecordT:
    """
    Bind ``record``'s annotated fields to flags and parse ``args`` into it.

    Keyword arguments are passed to TagFlagParser.
    """
    return TagFlagParser(record, **kwargs).parse(args)


def safe_parse(
    record: RecordT, args: Optional[Sequence[str]] = None, **kwargs: Any
) -> Result[RecordT, str]:
    """
    Like parse(), but command-line and config-file failures come back as Err.

    A record that cannot be bound at all still raises RecordTypeError.
    """
    kwargs["exit_on_error"] = False
    return TagFlagParser(record, **kwargs).safe_parse(args)
