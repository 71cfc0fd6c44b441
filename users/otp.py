"""Pending registrations held in the shared cache until the OTP is confirmed.

Entries live in Django's cache framework (Redis in dev/prod) keyed by email,
so any application instance can verify a code issued by another one and
state expires on its own after `REGISTRATION_OTP_TTL_SECONDS`.
"""

import hmac
import logging
import secrets

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.cache import cache

logger = logging.getLogger("auth")

MAX_ATTEMPTS = 5


class OtpError(Exception):
    """Raised when a pending registration cannot be verified."""


def _key(email: str) -> str:
    return f"registration:otp:{email.strip().lower()}"


def _ttl() -> int:
    return int(getattr(settings, "REGISTRATION_OTP_TTL_SECONDS", 600))


def _new_code() -> str:
    return f"{secrets.randbelow(10**6):06d}"


def start_registration(*, data: dict) -> str:
    """Store the registration payload with a fresh code and return the code.

    The password is hashed before it is cached.
    """

    payload = {k: v for k, v in data.items() if k != "password"}
    payload["password_hash"] = make_password(data["password"])
    code = _new_code()
    cache.set(_key(data["email"]), {"code": code, "attempts": 0, "data": payload}, timeout=_ttl())
    return code


def resend_code(*, email: str) -> str:
    """Issue a new code for an existing pending registration."""

    entry = cache.get(_key(email))
    if not entry:
        raise OtpError("No pending registration for this email.")
    entry["code"] = _new_code()
    entry["attempts"] = 0
    cache.set(_key(email), entry, timeout=_ttl())
    return entry["code"]


def consume_registration(*, email: str, code: str) -> dict:
    """Validate the code and return the pending payload, removing it from the cache.

    Too many wrong codes discard the pending registration.
    """

    key = _key(email)
    entry = cache.get(key)
    if not entry:
        raise OtpError("OTP expired or not found.")
    if not hmac.compare_digest(str(entry["code"]), str(code).strip()):
        entry["attempts"] = int(entry.get("attempts", 0)) + 1
        if entry["attempts"] >= MAX_ATTEMPTS:
            cache.delete(key)
            logger.info("registration_otp_locked", extra={"email": email})
        else:
            cache.set(key, entry, timeout=_ttl())
        raise OtpError("Invalid OTP.")
    cache.delete(key)
    return entry["data"]
