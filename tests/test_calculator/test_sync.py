# tests/test_calculator/test_sync.py

from decimal import Decimal

import pytest

from apps.calculator.state import (
    CalculatorItem,
    CalculatorState,
    ItemType,
    MarketSnapshot,
    SetCurrentDate,
    UpdateAllPrices,
)
from apps.calculator.sync import (
    CalculatorSyncSession,
    PriceRequestTracker,
    SyncEvent,
    lookup_price,
    sync_calculator,
)


@pytest.fixture
def usd_item():
    return CalculatorItem(
        id='1', type=ItemType.CURRENCY, name='US Dollar',
        quantity=Decimal('2'), unit_price=Decimal('480000'), sub_type='USD',
    )


@pytest.fixture
def state(usd_item):
    return CalculatorState(items=(usd_item,), current_date='2024-03-10', is_calculator_mode=True)


@pytest.fixture
def snapshot():
    return MarketSnapshot(
        currencies={'usd': {'value': 500000, 'change': 1.2}},
        gold={'gold_18k': {'value': '3500000'}},
        crypto={'btc': {'value': Decimal('6500000000')}},
    )


class TestLookupPrice:
    def test_manual_item_keeps_price(self, snapshot):
        item = CalculatorItem(id='m', type=ItemType.CUSTOM, name='Loan', quantity=Decimal('1'), unit_price=Decimal('42'))
        assert lookup_price(item, snapshot) == Decimal('42')

    def test_sub_type_is_case_insensitive(self, usd_item, snapshot):
        assert lookup_price(usd_item, snapshot) == Decimal('500000')

    def test_string_value(self, snapshot):
        item = CalculatorItem(id='g', type=ItemType.GOLD, name='Gold', quantity=Decimal('1'),
                              unit_price=Decimal('1'), sub_type='gold_18k')
        assert lookup_price(item, snapshot) == Decimal('3500000')

    def test_missing_entry_keeps_price(self, usd_item):
        snapshot = MarketSnapshot(currencies={'eur': {'value': 1}})
        assert lookup_price(usd_item, snapshot) == Decimal('480000')

    def test_missing_source_keeps_price(self, usd_item):
        assert lookup_price(usd_item, MarketSnapshot(gold={'x': {'value': 1}})) == Decimal('480000')

    def test_non_numeric_value_keeps_price(self, usd_item):
        snapshot = MarketSnapshot(currencies={'usd': {'value': 'n/a'}})
        assert lookup_price(usd_item, snapshot) == Decimal('480000')


class TestSyncCalculator:
    def test_prices_are_updated(self, state, snapshot):
        new_state, effects = sync_calculator(state, SyncEvent(date='2024-03-10', snapshot=snapshot))

        assert effects == (UpdateAllPrices(prices={'1': Decimal('500000')}),)
        assert new_state.items[0].unit_price == Decimal('500000')
        assert new_state.total_value == Decimal('1000000')
        assert state.items[0].unit_price == Decimal('480000')

    def test_second_run_is_a_no_op(self, state, snapshot):
        event = SyncEvent(date='2024-03-10', snapshot=snapshot)
        synced, _ = sync_calculator(state, event)
        again, effects = sync_calculator(synced, event)
        assert effects == ()
        assert again == synced

    def test_date_change_emits_set_current_date(self, state, snapshot):
        new_state, effects = sync_calculator(state, SyncEvent(date='2024-03-11', snapshot=snapshot))
        assert effects[0] == SetCurrentDate('2024-03-11')
        assert isinstance(effects[1], UpdateAllPrices)
        assert new_state.current_date == '2024-03-11'

    def test_same_date_emits_no_date_effect(self, snapshot):
        state = CalculatorState(
            items=(CalculatorItem(id='m', type=ItemType.CUSTOM, name='Cash', quantity=Decimal('1'), unit_price=Decimal('5')),),
            current_date='2024-03-10', is_calculator_mode=True,
        )
        _, effects = sync_calculator(state, SyncEvent(date='2024-03-10', snapshot=snapshot))
        assert effects == ()

    def test_mode_off_is_a_no_op(self, state, snapshot):
        off = CalculatorState(items=state.items, current_date=state.current_date, is_calculator_mode=False)
        new_state, effects = sync_calculator(off, SyncEvent(date='2024-03-11', snapshot=snapshot))
        assert effects == ()
        assert new_state is off

    def test_no_items_is_a_no_op(self, snapshot):
        empty = CalculatorState(is_calculator_mode=True)
        _, effects = sync_calculator(empty, SyncEvent(date='2024-03-11', snapshot=snapshot))
        assert effects == ()

    @pytest.mark.parametrize('flag', ['currencies_loading', 'gold_loading', 'crypto_loading'])
    def test_waits_while_loading(self, state, flag):
        snapshot = MarketSnapshot(currencies={'usd': {'value': 500000}}, **{flag: True})
        new_state, effects = sync_calculator(state, SyncEvent(date='2024-03-11', snapshot=snapshot))
        assert effects == ()
        assert new_state is state

    def test_waits_until_any_source_loaded(self, state):
        _, effects = sync_calculator(state, SyncEvent(date='2024-03-11', snapshot=MarketSnapshot()))
        assert effects == ()

    def test_manual_items_keep_their_price(self, usd_item, snapshot):
        manual = CalculatorItem(id='m', type=ItemType.CUSTOM, name='Cash', quantity=Decimal('1'), unit_price=Decimal('5'))
        state = CalculatorState(items=(usd_item, manual), current_date='2024-03-10', is_calculator_mode=True)

        new_state, effects = sync_calculator(state, SyncEvent(date='2024-03-10', snapshot=snapshot))

        assert effects[0].prices == {'1': Decimal('500000')}
        assert new_state.items[1] == manual


class TestPriceRequestTracker:
    def test_newer_request_supersedes(self):
        tracker = PriceRequestTracker()
        first = tracker.begin()
        second = tracker.begin()
        assert not tracker.is_current(first)
        assert tracker.is_current(second)
        assert tracker.current == second


class TestCalculatorSyncSession:
    def test_deliver_applies_prices(self, state, snapshot):
        session = CalculatorSyncSession(state)
        generation = session.select_date('2024-03-11')

        effects = session.deliver(generation, snapshot)

        assert SetCurrentDate('2024-03-11') in effects
        assert session.state.current_date == '2024-03-11'
        assert session.state.items[0].unit_price == Decimal('500000')

    def test_superseded_snapshot_is_discarded(self, state, snapshot):
        session = CalculatorSyncSession(state)
        old = session.select_date('2024-03-09')
        new = session.select_date('2024-03-11')

        newer_snapshot = MarketSnapshot(currencies={'usd': {'value': 510000}})
        assert session.deliver(new, newer_snapshot) != ()
        assert session.deliver(old, snapshot) == ()

        assert session.state.current_date == '2024-03-11'
        assert session.state.items[0].unit_price == Decimal('510000')

    def test_late_old_snapshot_before_new_one(self, state, snapshot):
        session = CalculatorSyncSession(state)
        old = session.select_date('2024-03-09')
        session.select_date('2024-03-11')

        assert session.deliver(old, snapshot) == ()
        assert session.state == state
