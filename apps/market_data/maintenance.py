# apps/market_data/maintenance.py

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, connections, transaction

from apps.core.exceptions import MaintenanceScriptFailure

logger = logging.getLogger(__name__)

# جداول قدیمی OHLC که دیگر استفاده نمی‌شوند
OHLC_COLLECTIONS = (
    'ohlcsnapshots',
    'ohlc1mdata',
    'ohlc5mdata',
    'ohlc15mdata',
    'ohlc30mdata',
    'ohlc1hdata',
    'ohlc4hdata',
    'ohlc1ddata',
)


@dataclass
class CleanupReport:
    dropped: list = field(default_factory=list)
    not_found: list = field(default_factory=list)
    failed: list = field(default_factory=list)  # (name, error message)
    dry_run: bool = False

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)

    @property
    def not_found_count(self) -> int:
        return len(self.not_found)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total_processed(self) -> int:
        return self.dropped_count + self.not_found_count + self.failed_count


def drop_ohlc_collections(using: str = 'default', dry_run: bool = False) -> CleanupReport:
    """
    Drop each legacy OHLC table that exists in the database.

    A connection failure raises MaintenanceScriptFailure before anything is
    touched. A failure dropping one table is logged and recorded in the report;
    the remaining tables are still processed.
    """
    connection = connections[using]
    try:
        connection.ensure_connection()
        existing = set(connection.introspection.table_names())
    except DatabaseError as exc:
        logger.error(f"Cannot connect to database '{using}': {exc}", exc_info=True)
        raise MaintenanceScriptFailure(f"Cannot connect to database '{using}': {exc}")

    report = CleanupReport(dry_run=dry_run)
    for name in OHLC_COLLECTIONS:
        if name not in existing:
            logger.info(f"Table {name} not found, skipping.")
            report.not_found.append(name)
            continue

        if dry_run:
            report.dropped.append(name)
            continue

        try:
            with transaction.atomic(using=using):
                with connection.cursor() as cursor:
                    cursor.execute(f"DROP TABLE {connection.ops.quote_name(name)}")
        except DatabaseError as exc:
            logger.error(f"Failed to drop table {name}: {exc}", exc_info=True)
            report.failed.append((name, str(exc)))
            continue

        logger.info(f"Dropped table {name}.")
        report.dropped.append(name)

    return report
