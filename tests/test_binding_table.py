import pytest

from entwine.binding_table import BindingTable
from entwine.domain import BindingSpec, Lifetime


class Database:
    pass


class Cache:
    pass


@pytest.fixture
def table() -> BindingTable:
    return BindingTable()


def test_lookup_returns_registered_binding(table):
    spec = BindingSpec(Database, Lifetime.SHARED)
    table.register(Database, spec)

    assert table.lookup(Database) is spec


def test_lookup_of_unregistered_key_returns_none(table):
    assert table.lookup(Cache) is None
    assert Cache not in table
    assert len(table) == 0


def test_reregistration_overwrites_and_keeps_position(table):
    table.register("a", BindingSpec(Database))
    table.register("b", BindingSpec(Cache))
    replacement = BindingSpec(Cache, Lifetime.SHARED)
    table.register("a", replacement)

    assert table.lookup("a") is replacement
    assert table.keys() == ["a", "b"]
    assert list(table) == ["a", "b"]


def test_clear_removes_every_binding(table):
    table.register(Database, BindingSpec(Database))
    table.register(Cache, BindingSpec(Cache))

    table.clear()

    assert len(table) == 0
    assert table.lookup(Database) is None
