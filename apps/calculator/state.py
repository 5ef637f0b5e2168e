# apps/calculator/state.py

"""
Calculator state and the reducer that applies sync effects to it.

All types are immutable; every operation returns a new state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional


class ItemType:
    CURRENCY = 'currency'
    GOLD = 'gold'
    COIN = 'coin'
    CUSTOM = 'custom'

    ALL = (CURRENCY, GOLD, COIN, CUSTOM)


# منبع قیمت هر نوع آیتم در snapshot بازار
SOURCE_BY_TYPE = {
    ItemType.CURRENCY: 'currencies',
    ItemType.GOLD: 'gold',
    ItemType.COIN: 'crypto',
}


@dataclass(frozen=True)
class CalculatorItem:
    id: str
    type: str
    name: str
    quantity: Decimal
    unit_price: Decimal
    sub_type: Optional[str] = None
    variant_code: Optional[str] = None
    variant_name: Optional[str] = None
    date: Optional[str] = None

    @property
    def total_value(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class CalculatorState:
    items: tuple = ()
    current_date: Optional[str] = None
    is_calculator_mode: bool = False

    @property
    def total_value(self) -> Decimal:
        return sum((item.total_value for item in self.items), Decimal('0'))


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Latest market data per source; a source that never loaded is None.
    """
    currencies: Optional[Mapping] = None
    gold: Optional[Mapping] = None
    crypto: Optional[Mapping] = None
    currencies_loading: bool = False
    gold_loading: bool = False
    crypto_loading: bool = False

    @property
    def is_loading(self) -> bool:
        return self.currencies_loading or self.gold_loading or self.crypto_loading

    @property
    def is_empty(self) -> bool:
        return self.currencies is None and self.gold is None and self.crypto is None

    def source_for(self, item_type: str) -> Optional[Mapping]:
        name = SOURCE_BY_TYPE.get(item_type)
        return getattr(self, name) if name else None

    @classmethod
    def from_payload(cls, payload: Mapping) -> 'MarketSnapshot':
        # منبع خالی یعنی هنوز داده‌ای برای آن بارگذاری نشده
        return cls(
            currencies=payload.get('currencies') or None,
            gold=payload.get('gold') or None,
            crypto=payload.get('crypto') or None,
        )


# --- effects ---

@dataclass(frozen=True)
class SetCurrentDate:
    date: str


@dataclass(frozen=True)
class UpdateAllPrices:
    prices: Mapping = field(default_factory=dict)  # item id -> new unit price


def apply_effect(state: CalculatorState, effect) -> CalculatorState:
    if isinstance(effect, SetCurrentDate):
        return replace(state, current_date=effect.date)
    if isinstance(effect, UpdateAllPrices):
        items = tuple(
            replace(item, unit_price=effect.prices[item.id]) if item.id in effect.prices else item
            for item in state.items
        )
        return replace(state, items=items)
    raise TypeError(f"Unknown calculator effect: {effect!r}")


def add_item(state: CalculatorState, item: CalculatorItem) -> CalculatorState:
    return replace(state, items=state.items + (item,))


def remove_item(state: CalculatorState, item_id: str) -> CalculatorState:
    return replace(state, items=tuple(item for item in state.items if item.id != item_id))


def update_item_quantity(state: CalculatorState, item_id: str, quantity: Decimal) -> CalculatorState:
    if quantity < 0:
        raise ValueError("Quantity cannot be negative.")
    return replace(state, items=tuple(
        replace(item, quantity=quantity) if item.id == item_id else item
        for item in state.items
    ))
