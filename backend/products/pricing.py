"""
Variant price resolution.

Maps a VariantConfig plus a sales channel (and optionally a size and a
temperature) to a unit price, or enumerates every purchasable combination.
Resolution never raises: "not sellable" is reported as None or as an empty
option list, and the caller decides what to show.
"""
from dataclasses import dataclass
from typing import List, Optional

from .variants import MenuItem, VariantConfig


@dataclass(frozen=True)
class VariantOption:
    """One sellable size/temperature combination of a variant item."""

    size: str
    temperature: str
    price: int

    @property
    def key(self) -> str:
        return f"{self.size}|{self.temperature}"

    @property
    def label(self) -> str:
        return f"{self.size.upper()} / {self.temperature.upper()}"

    def to_dict(self):
        return {
            "key": self.key,
            "size": self.size,
            "temperature": self.temperature,
            "price": self.price,
            "label": self.label,
        }


def list_sellable_options(config: VariantConfig, channel: str) -> List[VariantOption]:
    """
    Every (size, temperature) pair with a non-null price on the channel.

    Sizes are the outer loop and temperatures the inner loop, both in
    allowed-set order. A price of 0 is sellable.
    """
    options = []
    for size in config.allowed_sizes:
        for temperature in config.allowed_temperatures:
            price = config.price_for(channel, size, temperature)
            if price is not None:
                options.append(VariantOption(size=size, temperature=temperature, price=price))
    return options


def resolve_price(config: VariantConfig, channel: str, size: str, temperature: str) -> Optional[int]:
    return config.price_for(channel, size, temperature)


def resolve_default_option(config: VariantConfig, channel: str) -> Optional[VariantOption]:
    """
    The option a cashier gets without choosing: the configured default pair
    when it is sellable, otherwise the first sellable option.
    """
    if config.default_size is not None and config.default_temperature is not None:
        price = config.price_for(channel, config.default_size, config.default_temperature)
        if price is not None:
            return VariantOption(
                size=config.default_size, temperature=config.default_temperature, price=price
            )
    options = list_sellable_options(config, channel)
    return options[0] if options else None


def resolve_default_price(config: VariantConfig, channel: str) -> Optional[int]:
    option = resolve_default_option(config, channel)
    return option.price if option else None


def resolve_simple_price(menu: MenuItem, channel: str) -> Optional[int]:
    return menu.pricing.price_for(channel)


def resolve_menu_price(
    menu: MenuItem,
    channel: str,
    size: Optional[str] = None,
    temperature: Optional[str] = None,
) -> Optional[int]:
    """
    Unit price for a menu item at selection time.

    Simple items use their flat price. Variant items use a direct lookup when
    both size and temperature are chosen, and default resolution otherwise.
    """
    if menu.variants is None:
        return resolve_simple_price(menu, channel)
    if size and temperature:
        return resolve_price(menu.variants, channel, size, temperature)
    return resolve_default_price(menu.variants, channel)


def has_channel_price(menu: MenuItem, channel: str) -> bool:
    if menu.variants is None:
        return resolve_simple_price(menu, channel) is not None
    return bool(list_sellable_options(menu.variants, channel))
