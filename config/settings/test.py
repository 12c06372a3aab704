from .base import *  # noqa

DEBUG = False
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

SESSION_ENGINE = "core.tenancy.sessions"
TENANT_SWITCH_LOCK = "local"
TENANT_SWITCH_LOCK_TIMEOUT = 2

LOGGING["loggers"]["core"]["level"] = "DEBUG"  # noqa: F405
# let caplog see app records
LOGGING["loggers"]["core"]["propagate"] = True  # noqa: F405
