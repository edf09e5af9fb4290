"""
The built-in conventions and the canonical default pack.

The default pack, in application order:
1. NotMappedConvention: drop members marked as not persisted
2. IgnoreExtraElementsConvention: tolerate unknown elements on read
3. IgnoreIfNullConvention: omit None values on write
4. LowerFirstElementNameConvention: ``UserName`` is stored as ``userName``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mongorepo.conventions.base import ConventionPack
from mongorepo.mapping.markers import is_excluded

if TYPE_CHECKING:
    from mongorepo.mapping.class_map import ClassMap, MemberMap


def lower_first(name: str) -> str:
    """
    Lower-case only the first character of a name.

    Examples:
        >>> lower_first("CreatedTimestamp")
        'createdTimestamp'
        >>> lower_first("iD")
        'iD'
        >>> lower_first("URL")
        'uRL'
    """
    if not name:
        return name
    return name[0].lower() + name[1:]


class NotMappedConvention:
    """Unmaps members carrying NotMapped, IgnoreMapping or exclude=True."""

    name = "NotMapped"

    def apply_class_map(self, class_map: ClassMap) -> None:
        for member in class_map.member_maps:
            if is_excluded(member.field_info):
                class_map.unmap_member(member.member_name)


class IgnoreExtraElementsConvention:
    """Controls whether unknown document elements are dropped on read."""

    name = "IgnoreExtraElements"

    def __init__(self, ignore_extra_elements: bool = True) -> None:
        self.ignore_extra_elements = ignore_extra_elements

    def apply_class_map(self, class_map: ClassMap) -> None:
        class_map.set_ignore_extra_elements(self.ignore_extra_elements)


class IgnoreIfNullConvention:
    """Controls whether None values are omitted from written documents."""

    name = "IgnoreIfNull"

    def __init__(self, ignore_if_null: bool = True) -> None:
        self.ignore_if_null = ignore_if_null

    def apply_member_map(self, member_map: MemberMap) -> None:
        member_map.ignore_if_null = self.ignore_if_null


class LowerFirstElementNameConvention:
    """Element name is the member name with its first character lower-cased."""

    name = "LowerFirstElementName"

    def apply_member_map(self, member_map: MemberMap) -> None:
        if member_map.explicit_element_name:
            return
        member_map.element_name = lower_first(member_map.member_name)


def build_default_pack() -> ConventionPack:
    """Build a fresh pack holding the canonical conventions in order."""
    return ConventionPack(
        [
            NotMappedConvention(),
            IgnoreExtraElementsConvention(True),
            IgnoreIfNullConvention(True),
            LowerFirstElementNameConvention(),
        ]
    )


__all__ = [
    "lower_first",
    "NotMappedConvention",
    "IgnoreExtraElementsConvention",
    "IgnoreIfNullConvention",
    "LowerFirstElementNameConvention",
    "build_default_pack",
]
