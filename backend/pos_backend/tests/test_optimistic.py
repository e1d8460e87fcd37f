"""
Optimistic Update Tests

Run with: pytest backend/pos_backend/tests/test_optimistic.py -v
"""
import pytest

from pos_backend.optimistic import CacheStore, optimistic_update


@pytest.fixture
def store():
    return CacheStore("test.optimistic", 60)


class TestOptimisticUpdate:

    def test_confirm_replaces_tentative(self, store):
        store["po-1"] = {"status": "draft"}
        with optimistic_update(store, "po-1", {"status": "pending"}) as update:
            assert store["po-1"] == {"status": "pending"}
            update.confirm({"status": "pending", "version": 2})
        assert store["po-1"] == {"status": "pending", "version": 2}

    def test_failure_restores_prior_value(self, store):
        store["po-1"] = {"status": "draft"}
        with pytest.raises(RuntimeError):
            with optimistic_update(store, "po-1", {"status": "pending"}):
                raise RuntimeError("remote rejected")
        assert store["po-1"] == {"status": "draft"}

    def test_failure_removes_entry_that_did_not_exist(self, store):
        with pytest.raises(RuntimeError):
            with optimistic_update(store, "po-2", {"status": "pending"}):
                raise RuntimeError("remote rejected")
        assert "po-2" not in store

    def test_unconfirmed_success_keeps_tentative(self, store):
        with optimistic_update(store, "po-3", {"status": "pending"}):
            pass
        assert store.get("po-3") == {"status": "pending"}

    def test_missing_key_raises(self, store):
        with pytest.raises(KeyError):
            store["nope"]
