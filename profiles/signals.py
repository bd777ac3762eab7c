"""Permission reconciliation after migrations.

Runs once per `migrate` (for this app's `post_migrate`, which fires after the
auth and contenttypes tables and permissions exist) and reconciles the
Authenticated group with the capabilities each kind declares.
"""

from __future__ import annotations

from django.db.models.signals import post_migrate
from django.dispatch import receiver

from .capabilities import sync_authenticated_permissions


@receiver(post_migrate, dispatch_uid="profiles.sync_authenticated_permissions")
def sync_permissions_after_migrate(sender, app_config=None, using="default", **kwargs):
    if app_config is None or app_config.name != "profiles":
        return
    sync_authenticated_permissions(using=using)
