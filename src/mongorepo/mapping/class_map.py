"""
Class maps: the per-type description of how a model maps to a document.

A ClassMap is built once per document type by the DocumentMapper. It starts
from the model's pydantic fields (auto-mapping), is then shaped by the
registered conventions and an optional initializer, and is finally frozen.
A frozen class map is read-only and safe to share between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mongorepo.exceptions import MappingError, UnknownMemberError

if TYPE_CHECKING:
    from pydantic import BaseModel
    from pydantic.fields import FieldInfo

ID_ELEMENT_NAME = "_id"
ID_MEMBER_NAMES = ("Id", "id")


@dataclass
class MemberMap:
    """
    Mapping of one model field to one document element.

    Attributes:
        member_name: Field name on the model
        field_info: The pydantic FieldInfo for the field
        element_name: Element name in the stored document
        explicit_element_name: True if the element name was set explicitly
            (pydantic alias or set_element_name); naming conventions skip it
        ignore_if_null: Omit the element when the value is None
    """

    member_name: str
    field_info: FieldInfo = field(repr=False)
    element_name: str
    explicit_element_name: bool = False
    ignore_if_null: bool = False

    def set_element_name(self, element_name: str) -> None:
        """Set the element name explicitly."""
        self.element_name = element_name
        self.explicit_element_name = True

    @property
    def validation_key(self) -> str:
        """Key under which the value is passed to model_validate()."""
        alias = self.field_info.validation_alias
        if isinstance(alias, str):
            return alias
        return self.field_info.alias or self.member_name


class ClassMap:
    """
    Mapping of a pydantic model type to a document shape.

    Example:
        >>> class_map = ClassMap.auto_map(Customer)
        >>> class_map.unmap_member("display_label")
        >>> class_map.get_member_map("name").set_element_name("n")
        >>> class_map.freeze()
    """

    def __init__(self, document_type: type[BaseModel]) -> None:
        self.document_type = document_type
        self.ignore_extra_elements = False
        self._member_maps: dict[str, MemberMap] = {}
        self._id_member_name: str | None = None
        self._by_element: dict[str, MemberMap] = {}
        self._frozen = False

    @classmethod
    def auto_map(cls, document_type: type[BaseModel]) -> ClassMap:
        """Create a class map with one member map per pydantic field."""
        class_map = cls(document_type)
        for name, info in document_type.model_fields.items():
            class_map._member_maps[name] = MemberMap(
                member_name=name,
                field_info=info,
                element_name=info.alias or name,
                explicit_element_name=info.alias is not None,
            )
        return class_map

    @property
    def type_name(self) -> str:
        return self.document_type.__name__

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def member_maps(self) -> list[MemberMap]:
        """Member maps in field declaration order."""
        return list(self._member_maps.values())

    @property
    def id_member_map(self) -> MemberMap | None:
        if self._id_member_name is None:
            return None
        return self._member_maps.get(self._id_member_name)

    def get_member_map(self, member_name: str) -> MemberMap:
        try:
            return self._member_maps[member_name]
        except KeyError:
            raise UnknownMemberError(self.type_name, member_name) from None

    def find_member_by_element(self, element_name: str) -> MemberMap | None:
        """Look up a member by its element name. Only valid once frozen."""
        return self._by_element.get(element_name)

    def unmap_member(self, member_name: str) -> None:
        self._check_not_frozen()
        self.get_member_map(member_name)
        del self._member_maps[member_name]
        if self._id_member_name == member_name:
            self._id_member_name = None

    def set_id_member(self, member_name: str) -> None:
        self._check_not_frozen()
        self.get_member_map(member_name)
        self._id_member_name = member_name

    def set_ignore_extra_elements(self, ignore: bool) -> None:
        self._check_not_frozen()
        self.ignore_extra_elements = ignore

    def freeze(self) -> None:
        """
        Finalize the class map.

        Picks the id member if none was set, maps it to ``_id`` and builds
        the element index.

        Raises:
            MappingError: If two members map to the same element name
        """
        if self._frozen:
            return

        if self._id_member_name is None:
            self._id_member_name = self._detect_id_member()

        id_member = self.id_member_map
        if id_member is not None:
            id_member.element_name = ID_ELEMENT_NAME

        by_element: dict[str, MemberMap] = {}
        for member in self._member_maps.values():
            if member.element_name in by_element:
                raise MappingError(
                    f"{self.type_name} maps both "
                    f"'{by_element[member.element_name].member_name}' and "
                    f"'{member.member_name}' to element '{member.element_name}'"
                )
            by_element[member.element_name] = member

        self._by_element = by_element
        self._frozen = True

    def _detect_id_member(self) -> str | None:
        for member in self._member_maps.values():
            if member.explicit_element_name and member.element_name == ID_ELEMENT_NAME:
                return member.member_name
        for name in ID_MEMBER_NAMES:
            if name in self._member_maps:
                return name
        return None

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise MappingError(f"Class map for {self.type_name} is frozen")

    def __repr__(self) -> str:
        return (
            f"ClassMap({self.type_name}, members={list(self._member_maps)}, "
            f"id={self._id_member_name!r}, frozen={self._frozen})"
        )


__all__ = ["ClassMap", "MemberMap", "ID_ELEMENT_NAME"]
