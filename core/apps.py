"""AppConfig for the `core` app.

Holds shared infrastructure used by the domain apps: the record base model,
authentication glue and principal extraction, path/identifier utilities,
pagination, middleware and logging helpers.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
