"""
Unit tests for MongoRepositoryConfigService.

Tests cover:
- One-time registration of the "additional" pack
- Hook order and customization
- Concurrent initialization
- reset()
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from mongorepo.conventions import ConventionPack, ConventionRegistry, IgnoreIfNullConvention
from mongorepo.mapping import DocumentMapper
from mongorepo.services import MongoRepositoryConfigService
from tests.fixtures import Customer, OrderLine


class TestInitialize:
    """Tests for initialize()."""

    def test_registers_default_pack(self, empty_registry: ConventionRegistry) -> None:
        """initialize() registers the default pack under "additional"."""
        service = MongoRepositoryConfigService(registry=empty_registry)

        assert service.initialize() is True
        assert empty_registry.list_packs() == ["additional"]
        assert [c.name for c in empty_registry.lookup(OrderLine)] == [
            "NotMapped",
            "IgnoreExtraElements",
            "IgnoreIfNull",
            "LowerFirstElementName",
        ]
        assert MongoRepositoryConfigService.is_initialized()

    def test_second_call_is_noop(self, empty_registry: ConventionRegistry) -> None:
        """A second initialize() does nothing and returns False."""
        service = MongoRepositoryConfigService(registry=empty_registry)
        service.initialize()

        assert service.initialize() is False
        assert MongoRepositoryConfigService(registry=empty_registry).initialize() is False
        assert len(empty_registry.lookup(OrderLine)) == 4

    def test_reset_allows_reinitialization(self, empty_registry: ConventionRegistry) -> None:
        """After reset() initialize() runs again but the pack is not duplicated."""
        service = MongoRepositoryConfigService(registry=empty_registry)
        service.initialize()

        MongoRepositoryConfigService.reset()

        assert not MongoRepositoryConfigService.is_initialized()
        assert service.initialize() is True
        assert len(empty_registry.lookup(OrderLine)) == 4

    def test_skipped_pack_is_logged(
        self, empty_registry: ConventionRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A pack skipped because its name is taken logs a warning."""
        MongoRepositoryConfigService(registry=empty_registry).initialize()
        MongoRepositoryConfigService.reset()

        class MinimalService(MongoRepositoryConfigService):
            def initialize_conventions(self, pack: ConventionPack) -> None:
                pack.add(IgnoreIfNullConvention())

        with caplog.at_level(logging.WARNING, logger="mongorepo.services"):
            assert MinimalService(registry=empty_registry).initialize() is True

        assert "MinimalService conventions were not applied" in caplog.text
        assert len(empty_registry.lookup(OrderLine)) == 4

    def test_concurrent_initialize_runs_once(self, empty_registry: ConventionRegistry) -> None:
        """Concurrent callers register conventions exactly once."""
        calls: list[int] = []
        calls_lock = threading.Lock()

        class CountingService(MongoRepositoryConfigService):
            def initialize_extra(self) -> None:
                with calls_lock:
                    calls.append(1)

        barrier = threading.Barrier(16)

        def worker(_: int) -> bool:
            barrier.wait()
            return CountingService(registry=empty_registry).initialize()

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(worker, range(16)))

        assert results.count(True) == 1
        assert len(calls) == 1
        assert empty_registry.list_packs() == ["additional"]


class TestHooks:
    """Tests for subclass hooks."""

    def test_hooks_run_in_order(self, empty_registry: ConventionRegistry) -> None:
        """Conventions, data mappings, then extra initialization."""
        order: list[str] = []

        class OrderedService(MongoRepositoryConfigService):
            def initialize_conventions(self, pack: ConventionPack) -> None:
                order.append("conventions")
                super().initialize_conventions(pack)

            def initialize_data_mappings(self) -> None:
                order.append("data_mappings")

            def initialize_extra(self) -> None:
                order.append("extra")

        OrderedService(registry=empty_registry).initialize()

        assert order == ["conventions", "data_mappings", "extra"]

    def test_custom_conventions(self, empty_registry: ConventionRegistry) -> None:
        """initialize_conventions can replace the default pack."""

        class MinimalService(MongoRepositoryConfigService):
            def initialize_conventions(self, pack: ConventionPack) -> None:
                pack.add(IgnoreIfNullConvention())

        MinimalService(registry=empty_registry).initialize()

        assert [c.name for c in empty_registry.lookup(OrderLine)] == ["IgnoreIfNull"]

    def test_data_mappings_use_registered_conventions(
        self, empty_registry: ConventionRegistry
    ) -> None:
        """Class maps registered in initialize_data_mappings see the conventions."""
        mapper = DocumentMapper(empty_registry)

        class CustomerService(MongoRepositoryConfigService):
            def initialize_data_mappings(self) -> None:
                self.mapper.register_class_map(
                    Customer,
                    lambda cm: cm.get_member_map("UserName").set_element_name("login"),
                )

        CustomerService(registry=empty_registry, mapper=mapper).initialize()

        class_map = mapper.get_class_map(Customer)
        assert class_map.get_member_map("UserName").element_name == "login"
        assert class_map.get_member_map("HomeAddress").element_name == "homeAddress"

    def test_defaults_to_process_wide_instances(self) -> None:
        """Without arguments the service uses the default registry and mapper."""
        from mongorepo.conventions import default_convention_registry
        from mongorepo.mapping import default_mapper

        service = MongoRepositoryConfigService()

        assert service.registry is default_convention_registry
        assert service.mapper is default_mapper
