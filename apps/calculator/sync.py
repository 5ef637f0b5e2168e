# apps/calculator/sync.py

"""
Pushes live market prices into the calculator.

``sync_calculator`` is a pure transition: given the current state and a
(date, snapshot) event it returns the next state and the effects that
produced it. ``CalculatorSyncSession`` drives it for a sequence of date
selections and drops snapshots that arrive for a superseded selection.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.core.decimal_utils import to_decimal128_equivalent
from apps.core.exceptions import InvalidNumericValue

from .state import (
    CalculatorItem,
    CalculatorState,
    MarketSnapshot,
    SetCurrentDate,
    UpdateAllPrices,
    apply_effect,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncEvent:
    date: Optional[str]
    snapshot: MarketSnapshot


def lookup_price(item: CalculatorItem, snapshot: MarketSnapshot) -> Decimal:
    """
    Live price of ``item`` from the snapshot source matching its type, keyed by
    the lower-cased sub_type. Falls back to the current unit price; items
    without a sub_type are manual entries and always keep their price.
    """
    if not item.sub_type:
        return item.unit_price

    source = snapshot.source_for(item.type)
    if not source:
        return item.unit_price

    entry = source.get(item.sub_type.lower())
    value = entry.get('value') if isinstance(entry, Mapping) else None
    if value is None:
        return item.unit_price

    try:
        return to_decimal128_equivalent(value)
    except InvalidNumericValue:
        logger.warning(f"Ignoring non-numeric price {value!r} for {item.type}/{item.sub_type}.")
        return item.unit_price


def sync_calculator(state: CalculatorState, event: SyncEvent):
    """
    Returns ``(new_state, effects)``.

    Nothing happens when calculator mode is off, when there are no items,
    while any source is loading, or when no source has ever loaded. Otherwise
    the stored date follows the event date, and changed prices are applied in
    a single UpdateAllPrices effect (none when every price is unchanged).
    """
    if not state.is_calculator_mode or not state.items:
        return state, ()

    snapshot = event.snapshot
    if snapshot.is_loading or snapshot.is_empty:
        return state, ()

    effects = []
    if event.date and event.date != state.current_date:
        effects.append(SetCurrentDate(event.date))

    changed = {}
    for item in state.items:
        price = lookup_price(item, snapshot)
        if price != item.unit_price:
            changed[item.id] = price
    if changed:
        effects.append(UpdateAllPrices(prices=changed))

    new_state = state
    for effect in effects:
        new_state = apply_effect(new_state, effect)
    return new_state, tuple(effects)


class PriceRequestTracker:
    """
    Generation counter for price requests. Each new request supersedes all earlier ones.
    """

    def __init__(self):
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._generation

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation


class CalculatorSyncSession:
    """
    Holds calculator state across date selections.

    ``select_date`` starts a price request and returns its generation;
    ``deliver`` applies the snapshot for that generation, or discards it when a
    newer selection has been made since.
    """

    def __init__(self, state: CalculatorState):
        self.state = state
        self.tracker = PriceRequestTracker()
        self._requested_dates = {}

    def select_date(self, date: Optional[str]) -> int:
        generation = self.tracker.begin()
        self._requested_dates[generation] = date
        return generation

    def deliver(self, generation: int, snapshot: MarketSnapshot):
        date = self._requested_dates.pop(generation, None)
        if not self.tracker.is_current(generation):
            logger.debug(f"Discarding prices of generation {generation} (current {self.tracker.current}).")
            return ()
        # درخواست‌های قدیمی‌تر دیگر هرگز اعمال نمی‌شوند
        self._requested_dates = {g: d for g, d in self._requested_dates.items() if g > generation}
        self.state, effects = sync_calculator(self.state, SyncEvent(date=date, snapshot=snapshot))
        return effects
