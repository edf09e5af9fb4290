"""
Shared test fixtures for the mongorepo library.

Usage:
    from tests.fixtures import (
        OrderLine,
        DeclaredOrderLine,
        Customer,
        Address,
        LegacyRecord,
        AliasedRecord,
        OrderStatus,
    )
"""

from tests.fixtures.models import (
    Address,
    AliasedRecord,
    Customer,
    DeclaredOrderLine,
    LegacyRecord,
    OrderLine,
    OrderStatus,
)

__all__ = [
    "Address",
    "AliasedRecord",
    "Customer",
    "DeclaredOrderLine",
    "LegacyRecord",
    "OrderLine",
    "OrderStatus",
]
