"""
Menu pricing value objects.

A variant item carries a price matrix of channel x size x temperature; a
simple item carries a flat retail/reseller pair. In both cases a None price
means "not sellable", which is distinct from a price of 0 ("free").

Raw catalog JSON must go through build_variant_config(); downstream code only
ever sees validated VariantConfig instances.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from pos_backend.choices import Channel

from .exceptions import InvalidVariantConfigError

PriceMatrix = Mapping[str, Mapping[str, Optional[int]]]


def _validate_price(value, path: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidVariantConfigError(f"Price at {path} must be an integer", field=path)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidVariantConfigError(f"Price at {path} must be an integer", field=path)
    if value < 0:
        raise InvalidVariantConfigError(f"Price at {path} cannot be negative", field=path)
    return value


def _unique_tags(tags: Iterable[str], name: str) -> Tuple[str, ...]:
    if isinstance(tags, str):
        raise InvalidVariantConfigError(f"{name} must be a list of tags", field=name)
    result = []
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            raise InvalidVariantConfigError(f"{name} contains an invalid tag: {tag!r}", field=name)
        if tag not in result:
            result.append(tag)
    if not result:
        raise InvalidVariantConfigError(f"{name} cannot be empty", field=name)
    return tuple(result)


@dataclass(frozen=True)
class VariantConfig:
    """Validated size x temperature x channel price grid of a menu item."""

    allowed_sizes: Tuple[str, ...]
    allowed_temperatures: Tuple[str, ...]
    default_size: Optional[str] = None
    default_temperature: Optional[str] = None
    prices: Mapping[str, PriceMatrix] = field(default_factory=dict)

    def __post_init__(self):
        sizes = _unique_tags(self.allowed_sizes, "allowed_sizes")
        temperatures = _unique_tags(self.allowed_temperatures, "allowed_temperatures")

        if self.default_size is not None and self.default_size not in sizes:
            raise InvalidVariantConfigError(
                f"default_size '{self.default_size}' is not an allowed size", field="default_size"
            )
        if self.default_temperature is not None and self.default_temperature not in temperatures:
            raise InvalidVariantConfigError(
                f"default_temperature '{self.default_temperature}' is not an allowed temperature",
                field="default_temperature",
            )

        prices = {}
        for channel, matrix in (self.prices or {}).items():
            if channel not in Channel.values:
                raise InvalidVariantConfigError(f"Unknown sales channel '{channel}'", field="prices")
            frozen_matrix = {}
            for size, row in (matrix or {}).items():
                if size not in sizes:
                    raise InvalidVariantConfigError(
                        f"Price row for size '{size}' is not an allowed size", field=f"prices.{channel}"
                    )
                frozen_row = {}
                for temperature, price in (row or {}).items():
                    if temperature not in temperatures:
                        raise InvalidVariantConfigError(
                            f"Price for temperature '{temperature}' is not an allowed temperature",
                            field=f"prices.{channel}.{size}",
                        )
                    frozen_row[temperature] = _validate_price(
                        price, f"prices.{channel}.{size}.{temperature}"
                    )
                frozen_matrix[size] = MappingProxyType(frozen_row)
            prices[str(channel)] = MappingProxyType(frozen_matrix)

        object.__setattr__(self, "allowed_sizes", sizes)
        object.__setattr__(self, "allowed_temperatures", temperatures)
        object.__setattr__(self, "prices", MappingProxyType(prices))

    def price_for(self, channel: str, size: str, temperature: str) -> Optional[int]:
        return self.prices.get(channel, {}).get(size, {}).get(temperature)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed_sizes": list(self.allowed_sizes),
            "allowed_temperatures": list(self.allowed_temperatures),
            "default_size": self.default_size,
            "default_temperature": self.default_temperature,
            "prices": {
                channel: {size: dict(row) for size, row in matrix.items()}
                for channel, matrix in self.prices.items()
            },
        }


@dataclass(frozen=True)
class SimplePricing:
    """Flat price pair for items without a variant configuration."""

    retail_price: Optional[int] = None
    reseller_price: Optional[int] = None

    def __post_init__(self):
        _validate_price(self.retail_price, "retail_price")
        _validate_price(self.reseller_price, "reseller_price")

    def price_for(self, channel: str) -> Optional[int]:
        if channel == Channel.RESELLER:
            return self.reseller_price
        return self.retail_price


@dataclass(frozen=True)
class MenuItem:
    """The catalog view of a sellable menu item, as read from the menu service."""

    id: str
    name: str
    sku: Optional[str] = None
    variants: Optional[VariantConfig] = None
    pricing: SimplePricing = field(default_factory=SimplePricing)

    @property
    def item_type(self) -> str:
        return "variant" if self.variants is not None else "simple"


def _pick(raw: Mapping[str, Any], *keys, default=None):
    for key in keys:
        if key in raw:
            return raw[key]
    return default


def build_variant_config(raw: Mapping[str, Any]) -> VariantConfig:
    """
    Build a VariantConfig from raw catalog JSON, failing fast on bad input.

    Accepts the persisted snake_case shape as well as camelCase form input.
    Price entries for sizes or temperatures outside the allowed sets are
    dropped, matching how the catalog normalises its price maps.
    """
    if not isinstance(raw, Mapping):
        raise InvalidVariantConfigError("Variant configuration must be an object")

    sizes = _pick(raw, "allowed_sizes", "allowedSizes")
    temperatures = _pick(raw, "allowed_temperatures", "allowedTemperatures")
    if sizes is None:
        raise InvalidVariantConfigError("allowed_sizes is required", field="allowed_sizes")
    if temperatures is None:
        raise InvalidVariantConfigError("allowed_temperatures is required", field="allowed_temperatures")

    sizes = _unique_tags(sizes, "allowed_sizes")
    temperatures = _unique_tags(temperatures, "allowed_temperatures")

    raw_prices = _pick(raw, "prices", default=None) or {}
    if not isinstance(raw_prices, Mapping):
        raise InvalidVariantConfigError("prices must be an object", field="prices")

    prices = {}
    for channel, matrix in raw_prices.items():
        if matrix is None:
            continue
        if not isinstance(matrix, Mapping):
            raise InvalidVariantConfigError(f"prices.{channel} must be an object", field=f"prices.{channel}")
        normalized = {}
        for size in sizes:
            row = matrix.get(size)
            if row is None:
                continue
            if not isinstance(row, Mapping):
                raise InvalidVariantConfigError(
                    f"prices.{channel}.{size} must be an object", field=f"prices.{channel}.{size}"
                )
            normalized[size] = {temp: row[temp] for temp in temperatures if temp in row}
        prices[channel] = normalized

    return VariantConfig(
        allowed_sizes=sizes,
        allowed_temperatures=temperatures,
        default_size=_pick(raw, "default_size", "defaultSize"),
        default_temperature=_pick(raw, "default_temperature", "defaultTemperature"),
        prices=prices,
    )


def build_menu_item(raw: Mapping[str, Any]) -> MenuItem:
    """Build a MenuItem from a menu-service row."""
    variants_raw = raw.get("variants")
    return MenuItem(
        id=str(raw["id"]),
        name=raw.get("name", ""),
        sku=raw.get("sku"),
        variants=build_variant_config(variants_raw) if variants_raw is not None else None,
        pricing=SimplePricing(
            retail_price=_pick(raw, "price", "retail_price"),
            reseller_price=raw.get("reseller_price"),
        ),
    )
