"""
Convention protocols and the ConventionPack container.

A convention is a named rule applied while a class map is being built.
Class-map conventions see the whole ClassMap; member-map conventions are
applied to each remaining MemberMap in turn.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mongorepo.mapping.class_map import ClassMap, MemberMap


@runtime_checkable
class Convention(Protocol):
    """Anything with a name can be placed in a ConventionPack."""

    @property
    def name(self) -> str: ...


@runtime_checkable
class ClassMapConvention(Protocol):
    """Convention applied once to a class map."""

    @property
    def name(self) -> str: ...

    def apply_class_map(self, class_map: ClassMap) -> None: ...


@runtime_checkable
class MemberMapConvention(Protocol):
    """Convention applied to every member map of a class map."""

    @property
    def name(self) -> str: ...

    def apply_member_map(self, member_map: MemberMap) -> None: ...


class ConventionPack:
    """
    Ordered collection of conventions.

    Example:
        >>> pack = ConventionPack()
        >>> pack.add(IgnoreExtraElementsConvention(True))
        >>> pack.add(LowerFirstElementNameConvention())
        >>> [c.name for c in pack]
        ['IgnoreExtraElements', 'LowerFirstElementName']
    """

    def __init__(self, conventions: Iterable[Convention] = ()) -> None:
        self._conventions: list[Convention] = []
        for convention in conventions:
            self.add(convention)

    def add(self, convention: Convention) -> ConventionPack:
        """Append a convention. Returns the pack for chaining."""
        if not isinstance(convention, (ClassMapConvention, MemberMapConvention)):
            raise TypeError(
                f"{type(convention).__name__} implements neither apply_class_map "
                f"nor apply_member_map"
            )
        self._conventions.append(convention)
        return self

    @property
    def names(self) -> list[str]:
        return [convention.name for convention in self._conventions]

    def __iter__(self) -> Iterator[Convention]:
        return iter(list(self._conventions))

    def __len__(self) -> int:
        return len(self._conventions)

    def __repr__(self) -> str:
        return f"ConventionPack({self.names})"


__all__ = [
    "Convention",
    "ClassMapConvention",
    "MemberMapConvention",
    "ConventionPack",
]
