"""
Cart persistence over the Django cache framework.

The stored form is the plain dict produced by CartState.to_dict(). Writes
are pass-through and the last write wins.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from .state import CartState, default_cart_state

logger = logging.getLogger(__name__)


class CartStorage:

    def __init__(self, session_id: str, backend=None):
        if not session_id:
            raise ValueError("session_id is required for cart storage")
        self.session_id = session_id
        self._cache = backend or cache

    @property
    def key(self) -> str:
        return f"{settings.POS_CART_STORAGE_KEY}:{self.session_id}"

    def load(self) -> CartState:
        data = self._cache.get(self.key)
        if data is None:
            return default_cart_state()
        try:
            return CartState.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Discarding malformed cart state for session {self.session_id}: {e}")
            return default_cart_state()

    def save(self, state: CartState) -> None:
        self._cache.set(self.key, state.to_dict(), settings.POS_CART_STORAGE_TIMEOUT)

    def clear(self) -> None:
        self._cache.delete(self.key)
