"""
Markers that exclude model fields from the stored document.

Two markers are recognised, used through ``typing.Annotated``:

- NotMapped: schema-level "this is not persisted" marker
- IgnoreMapping: repository-level ignore marker

Fields declared with pydantic's ``Field(exclude=True)`` are treated the
same way.

Example:
    >>> class Customer(BaseModel):
    ...     name: str
    ...     display_label: Annotated[str, NotMapped] = ""
    ...     session_token: Annotated[str | None, IgnoreMapping()] = None
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


class NotMapped:
    """Marks a model field as not persisted."""

    def __repr__(self) -> str:
        return "NotMapped"


class IgnoreMapping:
    """Marks a model field as ignored by the document mapper."""

    def __repr__(self) -> str:
        return "IgnoreMapping"


_MARKER_TYPES = (NotMapped, IgnoreMapping)


def _is_marker(item: object) -> bool:
    # Accept both Annotated[x, NotMapped] and Annotated[x, NotMapped()]
    if isinstance(item, type):
        return issubclass(item, _MARKER_TYPES)
    return isinstance(item, _MARKER_TYPES)


def is_excluded(field_info: FieldInfo) -> bool:
    """Return True if a field carries an exclusion marker or exclude=True."""
    if field_info.exclude is True:
        return True
    return any(_is_marker(item) for item in field_info.metadata)


__all__ = ["NotMapped", "IgnoreMapping", "is_excluded"]
