from abc import ABC, abstractmethod
import logging

from payments.money import Number, percentage_of, to_decimal
from pos_backend.choices import DiscountMode

logger = logging.getLogger(__name__)


class DiscountStrategy(ABC):
    """The interface for an order-level discount strategy."""

    @abstractmethod
    def apply(self, subtotal: int, value: Number) -> int:
        pass


class NoDiscountStrategy(DiscountStrategy):

    def apply(self, subtotal: int, value: Number) -> int:
        return 0


class PercentageDiscountStrategy(DiscountStrategy):
    """Applies a (possibly fractional) percentage of the subtotal, rounded half-up."""

    def apply(self, subtotal: int, value: Number) -> int:
        if subtotal <= 0:
            return 0
        percentage = min(max(to_decimal(value), 0), 100)
        return min(percentage_of(subtotal, percentage), subtotal)


class NominalDiscountStrategy(DiscountStrategy):
    """Applies a fixed amount, capped at the subtotal."""

    def apply(self, subtotal: int, value: Number) -> int:
        if subtotal <= 0:
            return 0
        return min(max(int(value), 0), subtotal)


class DiscountStrategyFactory:
    _strategies = {
        DiscountMode.NONE: NoDiscountStrategy(),
        DiscountMode.PERCENTAGE: PercentageDiscountStrategy(),
        DiscountMode.NOMINAL: NominalDiscountStrategy(),
    }

    @classmethod
    def get_strategy(cls, mode: str) -> DiscountStrategy:
        strategy = cls._strategies.get(mode)
        if strategy is None:
            logger.warning(f"Unknown discount mode '{mode}', applying no discount")
            return cls._strategies[DiscountMode.NONE]
        return strategy
