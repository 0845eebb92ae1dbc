"""Periodic sweep that reconciles every unsettled drive.

Reads already reconcile lazily; running this (e.g. from cron) only keeps
stored statuses fresh for consumers that query the database directly.
"""

from django.core.management.base import BaseCommand

from drives.services import build_event_service


class Command(BaseCommand):
    help = "Reconcile the status of every drive that has not reached a terminal state."

    def handle(self, *args, **options):
        changed = build_event_service().reconcile_all()
        self.stdout.write(self.style.SUCCESS(f"Reconciled drives: {changed} changed"))
