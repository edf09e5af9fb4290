"""
Process-wide registry of convention packs.

Packs are registered under a name together with a type filter. When the
document mapper builds a class map it asks the registry for the conventions
that apply to the type, in registration order.

Registration is write-once per pack name: registering a name a second time
is a no-op, so repository instances sharing a process can all call it
safely. Class maps already built are not touched by later registrations.

Usage:
    registry = ConventionRegistry()
    registry.register("additional", build_default_pack())

    conventions = registry.lookup(Customer)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from mongorepo.conventions.base import Convention, ConventionPack

logger = logging.getLogger(__name__)

TypeFilter = Callable[[type], bool]


def _accept_all(document_type: type) -> bool:
    return True


@dataclass(frozen=True)
class RegisteredPack:
    """A named, immutable snapshot of a registered pack."""

    name: str
    conventions: tuple[Convention, ...]
    type_filter: TypeFilter


class ConventionRegistry:
    """
    Registry mapping pack names to convention packs.

    Can be used as a singleton (via the module-level
    `default_convention_registry`) or instantiated for isolated testing.

    Thread-Safety:
        All operations are thread-safe and use internal locking.
    """

    def __init__(self) -> None:
        self._packs: dict[str, RegisteredPack] = {}
        self._lock = threading.RLock()

    def register(
        self,
        pack_name: str,
        pack: ConventionPack,
        type_filter: TypeFilter | None = None,
    ) -> bool:
        """
        Register a convention pack under a name.

        Args:
            pack_name: Unique pack name
            pack: Conventions to apply, in order
            type_filter: Predicate selecting the types the pack applies to.
                Defaults to every type.

        Returns:
            True if the pack was registered, False if the name was already
            registered (in which case nothing changes)
        """
        if not pack_name:
            raise ValueError("pack_name must not be empty")

        with self._lock:
            if pack_name in self._packs:
                logger.debug(
                    "Convention pack '%s' already registered; skipping",
                    pack_name,
                    extra={"pack_name": pack_name},
                )
                return False

            self._packs[pack_name] = RegisteredPack(
                name=pack_name,
                conventions=tuple(pack),
                type_filter=type_filter or _accept_all,
            )
            logger.debug(
                "Registered convention pack '%s' with %d convention(s)",
                pack_name,
                len(pack),
                extra={"pack_name": pack_name, "conventions": pack.names},
            )
            return True

    def lookup(self, document_type: type) -> list[Convention]:
        """Return the conventions that apply to a type, in registration order."""
        with self._lock:
            packs = list(self._packs.values())

        conventions: list[Convention] = []
        for registered in packs:
            if registered.type_filter(document_type):
                conventions.extend(registered.conventions)
        return conventions

    def remove(self, pack_name: str) -> bool:
        """
        Remove a registered pack.

        Returns:
            True if the pack was registered and removed, False if not found
        """
        with self._lock:
            if pack_name in self._packs:
                del self._packs[pack_name]
                logger.debug(
                    "Removed convention pack '%s'",
                    pack_name,
                    extra={"pack_name": pack_name},
                )
                return True
            return False

    def contains(self, pack_name: str) -> bool:
        with self._lock:
            return pack_name in self._packs

    def list_packs(self) -> list[str]:
        """Pack names in registration order."""
        with self._lock:
            return list(self._packs)

    def clear(self) -> None:
        """
        Remove every registered pack.

        Primarily useful for testing to reset state between tests.
        """
        with self._lock:
            self._packs.clear()
            logger.debug("Convention registry cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._packs)

    def __bool__(self) -> bool:
        """Registry is always truthy, even when empty."""
        return True

    def __contains__(self, pack_name: str) -> bool:
        return self.contains(pack_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_packs())


# Module-level default registry instance
default_convention_registry = ConventionRegistry()


def register_conventions(
    pack_name: str,
    pack: ConventionPack,
    type_filter: TypeFilter | None = None,
    *,
    registry: ConventionRegistry | None = None,
) -> bool:
    """Register a pack in the given registry, or the default one."""
    target = registry if registry is not None else default_convention_registry
    return target.register(pack_name, pack, type_filter)


__all__ = [
    "ConventionRegistry",
    "RegisteredPack",
    "TypeFilter",
    "default_convention_registry",
    "register_conventions",
]
