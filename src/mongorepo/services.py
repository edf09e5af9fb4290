"""
Startup service that registers document mapping conventions once per process.

Call ``MongoRepositoryConfigService().initialize()`` during application
startup, before any repository maps a model type. Repeated calls, from any
thread or service instance, do nothing after the first.

Subclasses customize startup through three hooks:
- initialize_conventions(pack): add to or replace the default conventions
- initialize_data_mappings(): register class maps with custom initializers
- initialize_extra(): anything else that must run exactly once

Example:
    >>> class OrdersConfigService(MongoRepositoryConfigService):
    ...     def initialize_data_mappings(self) -> None:
    ...         self.mapper.register_class_map(
    ...             Order,
    ...             lambda cm: cm.set_id_member("OrderNumber"),
    ...         )
    >>>
    >>> OrdersConfigService().initialize()
"""

from __future__ import annotations

import logging
import threading
from typing import ClassVar

from mongorepo.conventions import (
    ConventionPack,
    ConventionRegistry,
    build_default_pack,
    default_convention_registry,
)
from mongorepo.mapping import DocumentMapper, default_mapper

logger = logging.getLogger(__name__)


class MongoRepositoryConfigService:
    """
    Registers the convention pack and data mappings exactly once.

    Thread-Safety:
        initialize() uses a class-level lock with a double-checked flag, so
        concurrent callers register conventions once.
    """

    PACK_NAME: ClassVar[str] = "additional"

    _initialized: ClassVar[bool] = False
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        registry: ConventionRegistry | None = None,
        mapper: DocumentMapper | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_convention_registry
        self.mapper = mapper if mapper is not None else default_mapper

    def initialize(self) -> bool:
        """
        Run the one-time startup registration.

        Returns:
            True if this call ran the startup hooks, False if they had
            already run. When the pack name is already taken in the
            registry the hooks still run, but the pack is not replaced
            and a warning is logged.
        """
        if MongoRepositoryConfigService._initialized:
            return False

        with MongoRepositoryConfigService._lock:
            if MongoRepositoryConfigService._initialized:
                return False

            pack_registered = self._register_conventions()
            self.initialize_data_mappings()
            self.initialize_extra()

            MongoRepositoryConfigService._initialized = True
            logger.info(
                "MongoDB repository conventions initialized",
                extra={"pack_name": self.PACK_NAME, "pack_registered": pack_registered},
            )
            return True

    @classmethod
    def is_initialized(cls) -> bool:
        return MongoRepositoryConfigService._initialized

    @classmethod
    def reset(cls) -> None:
        """
        Allow initialize() to run again.

        Primarily useful for testing. Conventions already registered in a
        registry stay registered.
        """
        with MongoRepositoryConfigService._lock:
            MongoRepositoryConfigService._initialized = False

    def _register_conventions(self) -> bool:
        pack = ConventionPack()
        self.initialize_conventions(pack)
        registered = self.registry.register(self.PACK_NAME, pack)
        if not registered:
            logger.warning(
                "Convention pack '%s' was already registered; %s conventions were not applied",
                self.PACK_NAME,
                type(self).__name__,
                extra={"pack_name": self.PACK_NAME, "service": type(self).__name__},
            )
        return registered

    def initialize_conventions(self, pack: ConventionPack) -> None:
        """Populate the pack registered under PACK_NAME."""
        for convention in build_default_pack():
            pack.add(convention)

    def initialize_data_mappings(self) -> None:
        """
        Register class maps that need more than the conventions provide.

        A model whose ``_id`` must come from a member other than ``id`` is
        the typical case; see DocumentMapper.register_class_map().
        """

    def initialize_extra(self) -> None:
        """Additional one-time initialization for subclasses."""


__all__ = ["MongoRepositoryConfigService"]
