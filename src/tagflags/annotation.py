"""
Parsing of the per-field annotation text.

An annotation has the form ``[<delimiter>]<description>[<delimiter><default>]``.
When the text starts with an ASCII letter or digit the delimiter is ``|``;
otherwise the first character is the delimiter and is dropped before splitting,
which lets descriptions or defaults contain a literal pipe.
"""

import string
from typing import NamedTuple, Optional

DEFAULT_DELIMITER = "|"

_PIPE_LEADERS = frozenset(string.ascii_letters + string.digits)


class ParsedAnnotation(NamedTuple):
    description: str
    default: Optional[str] = None
    delimiter: str = DEFAULT_DELIMITER

    @property
    def has_default(self) -> bool:
        return self.default is not None


def parse_annotation(raw: Optional[str]) -> Optional[ParsedAnnotation]:
    """
    Split an annotation into its description and optional default text.

    Only the first delimiter divides the two parts; any later occurrence is kept
    verbatim in the default text. Returns None for an empty annotation.

    Examples:
        >>> parse_annotation("do not inflate | 42")
        ParsedAnnotation(description='do not inflate', default='42', delimiter='|')
        >>> parse_annotation("! is a command ! 'yes | head'")
        ParsedAnnotation(description='is a command', default="'yes | head'", delimiter='!')
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    delimiter = text[0]
    if delimiter in _PIPE_LEADERS:
        delimiter = DEFAULT_DELIMITER
    else:
        text = text[1:]

    parts = text.split(delimiter, 1)
    description = parts[0].strip()
    default = parts[1].strip() if len(parts) > 1 else None
    return ParsedAnnotation(description, default, delimiter)
