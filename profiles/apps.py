"""
AppConfig for the `profiles` app.

Startup responsibilities
------------------------
- Import **signals** (required): the `post_migrate` receiver keeps the
  Authenticated group's model permissions in line with the declared capabilities.
- Import **schema** (optional): drf-spectacular helpers. In DEBUG we still
  surface errors to catch schema issues early.

Django's autoreloader may call `ready()` more than once; receivers use
`dispatch_uid`, so repeated imports are safe.
"""

from __future__ import annotations

import logging
from importlib import import_module

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class ProfilesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "profiles"

    def ready(self) -> None:  # pragma: no cover
        self._import_startup_module("profiles.signals", required=True)
        self._import_startup_module("profiles.schema", required=False)

    @staticmethod
    def _import_startup_module(dotted_path: str, *, required: bool) -> None:
        """
        Import a module at startup.

        - Required modules: log and re-raise on failure.
        - Optional modules: re-raise in DEBUG, otherwise log a warning and continue.
        """
        try:
            import_module(dotted_path)
        except Exception:
            if required or settings.DEBUG:
                logger.exception("Failed to import startup module: %s", dotted_path)
                raise
            logger.warning("Optional startup module failed to import and was skipped: %s", dotted_path)
