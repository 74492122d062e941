"""Test fixtures for health monitor tests."""

from tests.fixtures.health import FIXED_NOW, StubProvider, insert_rows, make_snapshot

__all__ = [
    "FIXED_NOW",
    "StubProvider",
    "insert_rows",
    "make_snapshot",
]
