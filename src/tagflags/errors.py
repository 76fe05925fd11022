"""
Exception types raised by tagflags.
"""

from typing import Optional


class TagFlagError(Exception):
    """Base class for all tagflags errors."""


class RecordTypeError(TagFlagError, TypeError):
    """
    Raised when the object handed to the binder is not a mutable record instance.

    This signals a programming error in the caller and is never turned into an
    Err value by safe_parse.
    """


class AmbiguousBooleanError(TagFlagError):
    """
    Raised when a bare 'true' or 'false' token appears while boolean flags exist.

    Boolean flags only take a value in '--Name=value' form, so a standalone
    token cannot be told apart from a positional argument.
    """

    def __init__(self, token: str, usage: Optional[str] = None) -> None:
        super().__init__(
            f"Standalone boolean value '{token}' is ambiguous: use '--Foo=bar' "
            "instead of '--Foo bar' syntax for boolean flags"
        )
        self.token = token
        self.usage = usage


class ArgumentParseError(TagFlagError):
    """Raised instead of exiting when argparse rejects the command line."""

    def __init__(self, message: str, usage: Optional[str] = None) -> None:
        super().__init__(message)
        self.usage = usage
