"""User-related service functions for registration and outbound email.

Registration is two-step: the payload is parked in the cache with a
one-time code (see `users.otp`), and the account is created only once the
code is confirmed.
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail
from django.db import IntegrityError, transaction

from .otp import consume_registration, resend_code, start_registration


class RegistrationError(Exception):
    """Raised when a confirmed registration cannot be turned into an account."""


def build_frontend_url(path: str) -> str:
    """Join `FRONTEND_URL` and a path, tolerating a trailing slash."""
    base = getattr(settings, "FRONTEND_URL", "") or ""
    return f"{base.rstrip('/')}{path}"


def send_registration_otp(email: str, code: str) -> None:
    """Email the one-time registration code."""
    minutes = int(getattr(settings, "REGISTRATION_OTP_TTL_SECONDS", 600)) // 60
    send_mail(
        subject="Your verification code",
        message=(
            f"Your verification code is {code}. It expires in {minutes} minutes.\n\n"
            f"Complete your registration at {build_frontend_url('/register/verify')}"
        ),
        from_email=None,
        recipient_list=[email],
    )


def begin_registration(data: dict) -> None:
    """Park the registration and email its code."""
    code = start_registration(data=data)
    send_registration_otp(data["email"], code)


def resend_registration_otp(email: str) -> None:
    code = resend_code(email=email)
    send_registration_otp(email, code)


def complete_registration(*, email: str, code: str):
    """Create the account for a confirmed registration and return it."""
    data = consume_registration(email=email, code=code)
    User = get_user_model()
    user = User(
        username=data["username"],
        email=data["email"],
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        phone=data.get("phone", ""),
        is_seller=bool(data.get("is_seller", False)),
        email_verified=True,
    )
    user.password = data["password_hash"]
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        raise RegistrationError("Username or email is already registered.")
    return user
