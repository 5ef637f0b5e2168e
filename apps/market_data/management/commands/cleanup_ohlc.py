# apps/market_data/management/commands/cleanup_ohlc.py

import logging

from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import MaintenanceScriptFailure
from apps.market_data.maintenance import OHLC_COLLECTIONS, drop_ohlc_collections

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Drops the legacy OHLC tables (ohlcsnapshots, ohlc1mdata ... ohlc1ddata) if they exist.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--database',
            default='default',
            help='Database alias to clean up.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report which tables would be dropped.',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        self.stdout.write(f"Checking {len(OHLC_COLLECTIONS)} OHLC tables on '{options['database']}'...")

        try:
            report = drop_ohlc_collections(using=options['database'], dry_run=dry_run)
        except MaintenanceScriptFailure as exc:
            raise CommandError(str(exc.detail), returncode=1)

        verb = 'Would drop' if dry_run else 'Dropped'
        for name in report.dropped:
            self.stdout.write(self.style.SUCCESS(f"{verb}: {name}"))
        for name in report.not_found:
            self.stdout.write(f"Not found: {name}")
        for name, error in report.failed:
            self.stdout.write(self.style.ERROR(f"Failed: {name} ({error})"))

        self.stdout.write("")
        self.stdout.write(f"Dropped: {report.dropped_count}")
        self.stdout.write(f"Not found: {report.not_found_count}")
        self.stdout.write(f"Failed: {report.failed_count}")
        self.stdout.write(f"Total processed: {report.total_processed}")

        if report.failed:
            raise CommandError(f"{report.failed_count} table(s) could not be dropped.", returncode=1)
        self.stdout.write(self.style.SUCCESS("OHLC cleanup completed."))
