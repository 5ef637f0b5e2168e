# tests/test_market_data/test_cleanup.py

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import OperationalError, connection, connections

from apps.core.exceptions import MaintenanceScriptFailure
from apps.market_data.maintenance import OHLC_COLLECTIONS, drop_ohlc_collections

pytestmark = pytest.mark.django_db


@pytest.fixture
def legacy_tables():
    names = ['ohlc1mdata', 'ohlc1hdata']
    with connection.cursor() as cursor:
        for name in names:
            cursor.execute(f"CREATE TABLE {connection.ops.quote_name(name)} (id integer PRIMARY KEY)")
    return names


def existing_tables():
    return set(connection.introspection.table_names())


class TestDropOhlcCollections:
    def test_drops_existing_and_skips_missing(self, legacy_tables):
        report = drop_ohlc_collections()

        assert sorted(report.dropped) == sorted(legacy_tables)
        assert report.dropped_count == 2
        assert report.not_found_count == 6
        assert report.failed_count == 0
        assert report.total_processed == len(OHLC_COLLECTIONS)
        assert not existing_tables() & set(legacy_tables)

    def test_nothing_to_drop(self):
        report = drop_ohlc_collections()
        assert report.dropped_count == 0
        assert report.not_found_count == 8

    def test_dry_run_keeps_tables(self, legacy_tables):
        report = drop_ohlc_collections(dry_run=True)

        assert report.dry_run is True
        assert report.dropped_count == 2
        assert set(legacy_tables) <= existing_tables()

    def test_connection_failure(self, mocker):
        mocker.patch.object(connections['default'], 'ensure_connection', side_effect=OperationalError('refused'))
        with pytest.raises(MaintenanceScriptFailure):
            drop_ohlc_collections()

    def test_drop_failure_continues(self, legacy_tables, mocker):
        original = connection.ops.quote_name
        # نام نادرست باعث شکست DROP برای ohlc1mdata می‌شود
        mocker.patch.object(
            connection.ops, 'quote_name',
            side_effect=lambda name: original('no_such_table') if name == 'ohlc1mdata' else original(name),
        )

        report = drop_ohlc_collections()

        assert [name for name, _ in report.failed] == ['ohlc1mdata']
        assert report.dropped == ['ohlc1hdata']
        assert report.total_processed == 8


class TestCleanupOhlcCommand:
    def test_output_and_counts(self, legacy_tables):
        out = StringIO()
        call_command('cleanup_ohlc', stdout=out)
        output = out.getvalue()

        assert 'Dropped: 2' in output
        assert 'Not found: 6' in output
        assert 'Failed: 0' in output
        assert 'Total processed: 8' in output
        assert 'OHLC cleanup completed.' in output

    def test_dry_run(self, legacy_tables):
        out = StringIO()
        call_command('cleanup_ohlc', '--dry-run', stdout=out)

        assert 'Would drop: ohlc1mdata' in out.getvalue()
        assert set(legacy_tables) <= existing_tables()

    def test_connection_failure_exits_non_zero(self, mocker):
        mocker.patch.object(connections['default'], 'ensure_connection', side_effect=OperationalError('refused'))
        with pytest.raises(CommandError) as excinfo:
            call_command('cleanup_ohlc', stdout=StringIO())
        assert excinfo.value.returncode == 1

    def test_drop_failure_exits_non_zero_after_summary(self, legacy_tables, mocker):
        original = connection.ops.quote_name
        mocker.patch.object(
            connection.ops, 'quote_name',
            side_effect=lambda name: original('no_such_table') if name == 'ohlc1hdata' else original(name),
        )
        out = StringIO()

        with pytest.raises(CommandError) as excinfo:
            call_command('cleanup_ohlc', stdout=out)

        assert excinfo.value.returncode == 1
        assert 'Dropped: 1' in out.getvalue()
        assert 'Failed: 1' in out.getvalue()
