from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

# Test settings: force SQLite so the suite runs without external services
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",  # noqa: F405
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

STORAGES = {
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

PAYMENT_GATEWAY = "payments.gateway.fake.FakeGateway"
STRIPE_SECRET_KEY = "sk_test_dummy"
PAYMENT_TIMEOUT_SECONDS = 5

# Relax throttling for tests to reduce flakiness
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    **BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
    "user": "10000/min",
    "anon": "10000/min",
    "inquiries": "1000/min",
    "orders": "1000/min",
    "orders_write": "1000/min",
}
