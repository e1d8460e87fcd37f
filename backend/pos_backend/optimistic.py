"""
Optimistic updates with rollback.

A tentative value is written to a local store before the remote call, the
prior value is remembered, and the store is either replaced with the
confirmed value (success) or restored from the snapshot (failure).

    with optimistic_update(store, key, tentative) as update:
        confirmed = client.update(...)
        update.confirm(confirmed)
"""
import logging
from contextlib import contextmanager

from django.core.cache import cache

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheStore:
    """Dict-like view over the Django cache under a key prefix."""

    def __init__(self, prefix: str, timeout: int, backend=None):
        self.prefix = prefix
        self.timeout = timeout
        self._cache = backend or cache

    def _key(self, key) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key, default=None):
        return self._cache.get(self._key(key), default)

    def __contains__(self, key) -> bool:
        return self._cache.get(self._key(key), _MISSING) is not _MISSING

    def __getitem__(self, key):
        value = self._cache.get(self._key(key), _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key, value):
        self._cache.set(self._key(key), value, self.timeout)

    def __delitem__(self, key):
        self._cache.delete(self._key(key))


class OptimisticUpdate:
    """Compensating action around a single store entry."""

    def __init__(self, store, key):
        self.store = store
        self.key = key
        self._snapshot = _MISSING
        self._settled = False

    def apply(self, tentative):
        self._snapshot = self.store.get(self.key, _MISSING)
        self.store[self.key] = tentative
        return tentative

    def confirm(self, confirmed):
        self.store[self.key] = confirmed
        self._settled = True
        return confirmed

    def rollback(self):
        if self._settled:
            return
        if self._snapshot is _MISSING:
            del self.store[self.key]
        else:
            self.store[self.key] = self._snapshot
        self._settled = True
        logger.info(f"Rolled back optimistic update for {self.key}")


@contextmanager
def optimistic_update(store, key, tentative):
    update = OptimisticUpdate(store, key)
    update.apply(tentative)
    try:
        yield update
    except Exception:
        update.rollback()
        raise
    if not update._settled:
        # Nothing confirmed: keep the tentative value as the new state.
        update._settled = True
