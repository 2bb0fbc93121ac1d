"""
Blob stores and the storage factory.
"""

import pytest

from brewhouse.core.config import get_settings
from brewhouse.services.storage import (
    MENU_KEY,
    BaseBlobStore,
    MemoryBlobStore,
    SqlBlobStore,
    get_blob_store,
    reset_blob_store,
)
from brewhouse.storefront import Storefront
from brewhouse.schemas import Category, PaymentMethod


@pytest.fixture
def sql_store(tmp_path):
    store = SqlBlobStore(f"sqlite:///{tmp_path / 'nested' / 'brewhouse.db'}")
    yield store
    store.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_store(request, tmp_path):
    if request.param == "memory":
        yield MemoryBlobStore()
        return
    store = SqlBlobStore(f"sqlite:///{tmp_path / 'store.db'}")
    yield store
    store.dispose()


class TestBlobStoreContract:

    def test_missing_key(self, any_store):
        assert any_store.get("nothing") is None

    def test_put_then_get(self, any_store):
        any_store.put(MENU_KEY, "[]")
        assert any_store.get(MENU_KEY) == "[]"

    def test_put_overwrites(self, any_store):
        any_store.put(MENU_KEY, "[1]")
        any_store.put(MENU_KEY, "[2]")
        assert any_store.get(MENU_KEY) == "[2]"

    def test_health_check(self, any_store):
        assert any_store.health_check() is True

    def test_interface_is_read_write_only(self):
        assert BaseBlobStore.__abstractmethods__ == {"provider_name", "get", "put", "health_check"}


class TestSqlBlobStore:

    def test_creates_database_directory(self, tmp_path, sql_store):
        sql_store.put("k", "v")
        assert (tmp_path / "nested" / "brewhouse.db").exists()
        assert sql_store.provider_name == "sql"

    def test_data_survives_new_engine(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'restart.db'}"
        first = SqlBlobStore(url)
        first.put("order_history", "[]")
        first.dispose()

        second = SqlBlobStore(url)
        assert second.get("order_history") == "[]"
        second.dispose()

    def test_storefront_round_trip(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'shop.db'}"
        store = SqlBlobStore(url)
        sf = Storefront(store)
        sf.load()
        sf.catalog.add("Cortado", "Equal parts.", 4.0, Category.HOT_COFFEE)
        sf.cart.add(sf.catalog.get("1"))
        order = sf.checkout(PaymentMethod.CASH)
        store.dispose()

        reopened = SqlBlobStore(url)
        sf2 = Storefront(reopened)
        sf2.load()
        assert sf2.ledger.get(order.id) == order
        assert sf2.catalog.items()[0].name == "Cortado"
        reopened.dispose()


class TestFactory:

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        get_settings.cache_clear()
        reset_blob_store()
        try:
            store = get_blob_store()
            assert isinstance(store, MemoryBlobStore)
            assert get_blob_store() is store
        finally:
            reset_blob_store()
            get_settings.cache_clear()

    def test_sql_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STORAGE_BACKEND", "SQL")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'factory.db'}")
        get_settings.cache_clear()
        reset_blob_store()
        try:
            store = get_blob_store()
            assert isinstance(store, SqlBlobStore)
            store.dispose()
        finally:
            reset_blob_store()
            get_settings.cache_clear()
