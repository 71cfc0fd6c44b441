"""User models for authentication and marketplace roles.

The custom `User` extends Django's `AbstractUser` with a unique email,
an optional E.164 phone number and the `is_seller` capability flag that
is embedded into issued access tokens.
"""

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class User(AbstractUser):
    """Marketplace account.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - email_verified: set once the registration OTP has been confirmed.
    - is_seller: whether the account may list gigs and own stores.
    """

    email = models.EmailField(unique=True)
    email_verified = models.BooleanField(default=False)
    is_seller = models.BooleanField(default=False)
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +14155552671)")],
        help_text="Primary contact number for the account in E.164 format",
    )

    def save(self, *args, **kwargs):
        """Normalize email and phone whitespace before persisting."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)
