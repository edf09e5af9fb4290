"""
Document mapping conventions.

Conventions are registered once per process in a ConventionRegistry and
shape every class map built afterwards:

    >>> from mongorepo.conventions import build_default_pack, register_conventions
    >>> register_conventions("additional", build_default_pack())
    True
    >>> register_conventions("additional", build_default_pack())  # no-op
    False
"""

from mongorepo.conventions.base import (
    ClassMapConvention,
    Convention,
    ConventionPack,
    MemberMapConvention,
)
from mongorepo.conventions.builtin import (
    IgnoreExtraElementsConvention,
    IgnoreIfNullConvention,
    LowerFirstElementNameConvention,
    NotMappedConvention,
    build_default_pack,
    lower_first,
)
from mongorepo.conventions.registry import (
    ConventionRegistry,
    RegisteredPack,
    TypeFilter,
    default_convention_registry,
    register_conventions,
)

__all__ = [
    # Protocols and pack
    "Convention",
    "ClassMapConvention",
    "MemberMapConvention",
    "ConventionPack",
    # Built-in conventions
    "NotMappedConvention",
    "IgnoreExtraElementsConvention",
    "IgnoreIfNullConvention",
    "LowerFirstElementNameConvention",
    "build_default_pack",
    "lower_first",
    # Registry
    "ConventionRegistry",
    "RegisteredPack",
    "TypeFilter",
    "default_convention_registry",
    "register_conventions",
]
