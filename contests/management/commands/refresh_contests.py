"""
Management command to refresh stored contests from the contest sources.

Usage:
    python manage.py refresh_contests
    python manage.py refresh_contests --force
    python manage.py refresh_contests --force --source codeforces --source leetcode
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from contests.services.aggregator import ContestAggregator
from contests.sources import get_source

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Refresh contests from Codeforces, CodeChef, LeetCode and the past-contest page."""

    help = 'Fetch contests from the configured sources and upsert them'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Refresh even if stored contests are still fresh',
        )
        parser.add_argument(
            '--source',
            action='append',
            dest='sources',
            default=None,
            help='Source to refresh (repeatable; default: CONTESTS_SOURCES)',
        )

    def handle(self, *args, **options):
        force = options['force']
        source_names = options['sources']

        sources = None
        if source_names:
            try:
                sources = [get_source(name) for name in source_names]
            except ValueError as e:
                raise CommandError(str(e))

        aggregator = ContestAggregator(sources=sources)

        if force:
            summary = aggregator.refresh()
        else:
            feed = aggregator.get_contests()
            if not feed.refreshed:
                self.stdout.write(self.style.SUCCESS(
                    'Contests are fresh, nothing to do (use --force to refresh anyway)'
                ))
                return
            self.stdout.write(self.style.SUCCESS(
                f'Refreshed: {len(feed.upcoming)} upcoming, {len(feed.past)} past contests'
            ))
            return

        for name, count in summary.per_source.items():
            style = self.style.SUCCESS if count else self.style.WARNING
            self.stdout.write(style(f'  {name}: {count} contests'))

        self.stdout.write(self.style.SUCCESS(
            f'Refreshed: {summary.fetched} fetched, {summary.persisted} upserted'
        ))
