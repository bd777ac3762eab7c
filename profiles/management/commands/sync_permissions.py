"""
Reconcile the Authenticated group's permissions with the declared capabilities.

The same reconciliation runs after every `migrate`; this command is for running
it on demand (e.g. after editing a kind's actions without a migration).

Usage
-----
    python manage.py sync_permissions
    python manage.py sync_permissions --database replica
"""

from django.core.management.base import BaseCommand, CommandParser
from django.db import DEFAULT_DB_ALIAS

from profiles.capabilities import AUTHENTICATED_GROUP, sync_authenticated_permissions


class Command(BaseCommand):
    help = f"Grant declared capability permissions to the {AUTHENTICATED_GROUP} group and revoke stale ones."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--database",
            default=DEFAULT_DB_ALIAS,
            help="Database alias to reconcile (default: %(default)s).",
        )

    def handle(self, *args, **options):
        report = sync_authenticated_permissions(using=options["database"])
        for codename in report.granted:
            self.stdout.write(f"granted {codename}")
        for codename in report.revoked:
            self.stdout.write(self.style.WARNING(f"revoked {codename}"))
        if report.changed:
            self.stdout.write(
                self.style.SUCCESS(f"Permissions updated: {len(report.granted)} granted, {len(report.revoked)} revoked.")
            )
        else:
            self.stdout.write(self.style.SUCCESS("Permissions already in sync."))
