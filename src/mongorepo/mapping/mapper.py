"""
Document mapper: converts pydantic models to and from MongoDB documents.

The mapper owns one frozen ClassMap per model type. A class map is built
the first time a type is used, from the conventions registered at that
moment; it is never rebuilt. Register conventions (see
MongoRepositoryConfigService) before any model type is first mapped.

Example:
    >>> mapper = DocumentMapper()
    >>> document = mapper.to_document(OrderLine(Sku="A-1", Quantity=2))
    >>> document
    {'sku': 'A-1', 'quantity': 2}
    >>> mapper.from_document(OrderLine, {"sku": "A-1", "quantity": 2, "extra": 1})
    OrderLine(Sku='A-1', Quantity=2)
"""

from __future__ import annotations

import logging
import threading
import types
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from mongorepo.conventions.base import ClassMapConvention, MemberMapConvention
from mongorepo.conventions.registry import ConventionRegistry, default_convention_registry
from mongorepo.exceptions import ClassMapAlreadyRegisteredError, UnmappedElementError
from mongorepo.mapping.class_map import ClassMap

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)

ClassMapInitializer = Callable[[ClassMap], None]

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


def _is_model_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


class DocumentMapper:
    """
    Builds and caches class maps and converts models with them.

    Thread-Safety:
        Class map construction is serialized by the mapper's own lock.
        Convention lookup happens before the lock is taken, so the mapper
        never holds its lock while calling into the registry.
    """

    def __init__(self, registry: ConventionRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_convention_registry
        self._class_maps: dict[type, ClassMap] = {}
        self._lock = threading.RLock()

    @property
    def registry(self) -> ConventionRegistry:
        return self._registry

    def register_class_map(
        self,
        document_type: type[BaseModel],
        initializer: ClassMapInitializer | None = None,
    ) -> ClassMap:
        """
        Build the class map for a type, with an optional customization step.

        The initializer runs after the conventions and before the class map
        is frozen, so it can override element names or pick the id member:

            >>> mapper.register_class_map(
            ...     Customer,
            ...     lambda cm: cm.get_member_map("Name").set_element_name("n"),
            ... )

        Raises:
            ClassMapAlreadyRegisteredError: If the type is already mapped
        """
        return self._build(document_type, initializer, raise_if_mapped=True)

    def get_class_map(self, document_type: type[BaseModel]) -> ClassMap:
        """Return the class map for a type, building it on first use."""
        class_map = self._class_maps.get(document_type)
        if class_map is not None:
            return class_map
        return self._build(document_type, None, raise_if_mapped=False)

    def is_mapped(self, document_type: type) -> bool:
        return document_type in self._class_maps

    def clear(self) -> None:
        """
        Forget every class map.

        Primarily useful for testing to reset state between tests.
        """
        with self._lock:
            self._class_maps.clear()

    def _build(
        self,
        document_type: type[BaseModel],
        initializer: ClassMapInitializer | None,
        raise_if_mapped: bool,
    ) -> ClassMap:
        if not _is_model_type(document_type):
            raise TypeError(
                f"document_type must be a pydantic BaseModel subclass, "
                f"got {getattr(document_type, '__name__', document_type)!r}"
            )

        conventions = self._registry.lookup(document_type)

        with self._lock:
            existing = self._class_maps.get(document_type)
            if existing is not None:
                if raise_if_mapped:
                    raise ClassMapAlreadyRegisteredError(document_type.__name__)
                return existing

            class_map = ClassMap.auto_map(document_type)
            for convention in conventions:
                if isinstance(convention, ClassMapConvention):
                    convention.apply_class_map(class_map)
                if isinstance(convention, MemberMapConvention):
                    for member in class_map.member_maps:
                        convention.apply_member_map(member)

            if initializer is not None:
                initializer(class_map)

            class_map.freeze()
            self._class_maps[document_type] = class_map
            logger.debug(
                "Mapped %s with %d convention(s)",
                document_type.__name__,
                len(conventions),
                extra={
                    "document_type": document_type.__name__,
                    "conventions": [c.name for c in conventions],
                },
            )
            return class_map

    def to_document(self, model: BaseModel) -> dict[str, Any]:
        """
        Convert a model to a document using its class map.

        Nested models are converted with their own class maps; sequences,
        mappings and enums are converted element by element.
        """
        class_map = self.get_class_map(type(model))
        document: dict[str, Any] = {}
        for member in class_map.member_maps:
            value = getattr(model, member.member_name)
            if value is None and member.ignore_if_null:
                continue
            document[member.element_name] = self._encode_value(value)
        return document

    def from_document(self, document_type: type[TModel], document: Mapping[str, Any]) -> TModel:
        """
        Convert a document to a model using the type's class map.

        Raises:
            UnmappedElementError: If the document has elements the class map
                does not know and extra elements are not ignored
            pydantic.ValidationError: If the mapped values fail validation
        """
        class_map = self.get_class_map(document_type)
        data: dict[str, Any] = {}
        unmapped: list[str] = []

        for element_name, value in document.items():
            member = class_map.find_member_by_element(element_name)
            if member is None:
                unmapped.append(element_name)
                continue
            data[member.validation_key] = self._decode_value(member.field_info.annotation, value)

        if unmapped and not class_map.ignore_extra_elements:
            raise UnmappedElementError(class_map.type_name, unmapped)

        return document_type.model_validate(data)

    def _encode_value(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return self.to_document(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, Mapping):
            return {key: self._encode_value(item) for key, item in value.items()}
        if isinstance(value, _SEQUENCE_ORIGINS):
            return [self._encode_value(item) for item in value]
        return value

    def _decode_value(self, annotation: Any, value: Any) -> Any:
        if value is None or annotation is None:
            return value

        if _is_model_type(annotation):
            if isinstance(value, Mapping):
                return self.from_document(annotation, value)
            return value

        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Union or origin is types.UnionType:
            arms = [arg for arg in args if arg is not type(None)]
            if len(arms) == 1:
                return self._decode_value(arms[0], value)
            return self._decode_union(arms, value)

        if origin is tuple and args and args[-1] is not Ellipsis and isinstance(value, list):
            if len(args) == len(value):
                return [self._decode_value(arg, item) for arg, item in zip(args, value)]
            return value

        if origin in _SEQUENCE_ORIGINS and isinstance(value, list):
            item_type = args[0] if args else None
            return [self._decode_value(item_type, item) for item in value]

        if origin in (dict, Mapping) and isinstance(value, Mapping) and len(args) == 2:
            return {key: self._decode_value(args[1], item) for key, item in value.items()}

        return value

    def _decode_union(self, arms: list[Any], value: Any) -> Any:
        """
        Decode a value against the first union arm it fits.

        Mapping values try each model arm in order. Arms whose class map
        knows every element of the document are tried before the rest, so
        a document is not read as a model that would discard its elements.
        """
        if isinstance(value, Mapping):
            model_arms = [arm for arm in arms if _is_model_type(arm)]
            if model_arms:
                exact = [arm for arm in model_arms if self._knows_elements(arm, value)]
                candidates = exact + [arm for arm in model_arms if arm not in exact]
                for index, arm in enumerate(candidates):
                    try:
                        return self.from_document(arm, value)
                    except (ValidationError, UnmappedElementError):
                        if index == len(candidates) - 1:
                            raise

        for arm in arms:
            origin = get_origin(arm)
            if isinstance(value, list) and origin in _SEQUENCE_ORIGINS:
                return self._decode_value(arm, value)
            if isinstance(value, Mapping) and origin in (dict, Mapping):
                return self._decode_value(arm, value)
        return value

    def _knows_elements(self, document_type: type[BaseModel], document: Mapping[str, Any]) -> bool:
        class_map = self.get_class_map(document_type)
        return all(class_map.find_member_by_element(name) is not None for name in document)


# Module-level default mapper bound to the default convention registry
default_mapper = DocumentMapper()


__all__ = [
    "ClassMapInitializer",
    "DocumentMapper",
    "default_mapper",
]
