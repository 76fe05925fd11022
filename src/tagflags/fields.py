"""
Field introspection for configuration records.

A record is an instance of a dataclass or of a plain class with annotated
attributes. Each field may carry an annotation string, attached either through
``typing.Annotated``::

    class Options:
        IQ: Annotated[int, "do not inflate | 42"]

or through dataclass field metadata under the ``"tag"`` key::

    @dataclass
    class Options:
        IQ: int = field(default=0, metadata={"tag": "do not inflate | 42"})
"""

import dataclasses
import typing
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, List, Optional, Type

from .convert import FieldKind

TAG_METADATA_KEY = "tag"
USAGE_FIELD = "Usage"

_SCALAR_KINDS = {
    str: FieldKind.TEXT,
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
}


@dataclass(frozen=True)
class FieldDescriptor:
    """Metadata derived for one declared field of a record type."""

    name: str
    kind: FieldKind
    hint: Any
    tag: Optional[str] = None


def _split_annotated(hint: Any) -> tuple[Any, Optional[str]]:
    """Return the bare type and the first string extra of an Annotated hint."""
    if typing.get_origin(hint) is Annotated:
        base, *extras = typing.get_args(hint)
        tag = next((extra for extra in extras if isinstance(extra, str)), None)
        return base, tag
    return hint, None


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or typing.get_origin(hint) is ClassVar


def classify(hint: Any) -> FieldKind:
    """
    Map a (bare) type hint to the kind of flag it produces.

    ``list[str]`` and ``typing.List[str]`` capture positional arguments. Any type
    other than str, bool, int, float and those lists is FieldKind.OTHER.
    """
    if hint in _SCALAR_KINDS:
        return _SCALAR_KINDS[hint]
    if typing.get_origin(hint) in (list, List) and typing.get_args(hint) == (str,):
        return FieldKind.ARGS
    return FieldKind.OTHER


def get_usage_tag(
    record_type: Type[Any], usage_field: str = USAGE_FIELD
) -> Optional[str]:
    """
    Return the raw, untrimmed annotation attached to the usage field.

    None means the record does not declare a usage field at all.
    """
    hints = typing.get_type_hints(record_type, include_extras=True)
    if usage_field not in hints:
        return None
    _, tag = _split_annotated(hints[usage_field])
    if tag is None and dataclasses.is_dataclass(record_type):
        for f in dataclasses.fields(record_type):
            if f.name == usage_field:
                tag = f.metadata.get(TAG_METADATA_KEY)
    return tag or ""


def iter_fields(
    record_type: Type[Any], usage_field: str = USAGE_FIELD
) -> List[FieldDescriptor]:
    """
    List the fields of ``record_type`` in declaration order.

    Base class fields come first. Private names (leading underscore), ClassVar
    attributes and the usage field are left out; everything else is returned
    with its kind and raw annotation so the caller can decide what to bind.
    """
    hints = typing.get_type_hints(record_type, include_extras=True)
    metadata_tags = {}
    if dataclasses.is_dataclass(record_type):
        metadata_tags = {
            f.name: f.metadata.get(TAG_METADATA_KEY)
            for f in dataclasses.fields(record_type)
        }

    descriptors = []
    for name, hint in hints.items():
        if name.startswith("_") or name == usage_field or _is_class_var(hint):
            continue
        bare, tag = _split_annotated(hint)
        if tag is None:
            tag = metadata_tags.get(name)
        descriptors.append(FieldDescriptor(name, classify(bare), bare, tag))
    return descriptors
