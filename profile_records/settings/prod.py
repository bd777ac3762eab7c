from .base import *  # noqa

# ----------------------------------------------------------------------
# Core
# ----------------------------------------------------------------------
DEBUG = False

# Require an explicit secret in prod
SECRET_KEY = env("SECRET_KEY")

# Hosts & CSRF must be provided by env in prod
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])

# ----------------------------------------------------------------------
# Database (must NOT default to SQLite in prod)
# ----------------------------------------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL")
}

STATIC_ROOT = BASE_DIR / "staticfiles"

# ----------------------------------------------------------------------
# Security hardening (Django deploy checklist)
# ----------------------------------------------------------------------
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", True)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
CSRF_COOKIE_HTTPONLY = True

SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

# HSTS (enable preload only after verifying HTTPS everywhere)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", 60 * 60 * 24 * 7)  # 1 week
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"

# If behind a proxy/load balancer that terminates TLS
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# ----------------------------------------------------------------------
# Logging (request line keeps its structured format; the rest goes to root)
# ----------------------------------------------------------------------
LOGGING["root"] = {"handlers": ["app_console"], "level": LOG_LEVEL}  # type: ignore[name-defined]
LOGGING["loggers"]["django.request"] = {  # type: ignore[name-defined]
    "handlers": ["app_console"], "level": "WARNING", "propagate": False,
}
LOGGING["loggers"]["django.security"] = {  # type: ignore[name-defined]
    "handlers": ["app_console"], "level": "WARNING", "propagate": False,
}
