"""Serializers for user profile, registration, and sign-in flows.

- UserMeSerializer: read-only profile data for the authenticated user.
- RegistrationSerializer: validates a registration before the OTP step.
- RegistrationVerifySerializer / ResendOtpSerializer: OTP confirmation inputs.
- EmailOrPhoneTokenObtainPairSerializer: obtain JWTs using email or phone,
  embedding the seller capability in the token claims.
"""

from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning basic profile fields for the current user."""

    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name", "phone", "is_seller"]


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to start a registration.

    Validates uniqueness of `username` and `email` and enforces Django
    password validators. The account itself is created after OTP confirmation.
    """

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True, default="")
    last_name = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    is_seller = serializers.BooleanField(required=False, default=False)

    def validate_username(self, value: str) -> str:
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username is already taken.")
        return value

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate_password(self, value: str) -> str:
        from django.contrib.auth.password_validation import validate_password

        user = User(username=self.initial_data.get("username", ""), email=self.initial_data.get("email", ""))
        validate_password(value, user=user)
        return value


class RegistrationVerifySerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.CharField(max_length=12)


class ResendOtpSerializer(serializers.Serializer):
    email = serializers.EmailField()


class SignOutSerializer(serializers.Serializer):
    """Request body for signing out (blacklisting refresh token)."""

    refresh = serializers.CharField()


def tokens_for_user(user) -> dict:
    """Issue a refresh/access pair carrying the subject id and seller flag."""
    refresh = RefreshToken.for_user(user)
    refresh["is_seller"] = bool(user.is_seller)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


class EmailOrPhoneTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs by authenticating with either email or phone.

    Accepts a single `identifier` field which may be an email address
    (case-insensitive) or an E.164 phone number, and a `password`.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        if not identifier or not password:
            raise serializers.ValidationError({"detail": "identifier and password are required."})

        user = None
        lookup = {"email": identifier.lower()} if "@" in identifier else {"phone": identifier}
        try:
            user = User.objects.get(**lookup)
        except User.DoesNotExist:
            pass

        if not user or not user.check_password(password) or not user.is_active:
            raise serializers.ValidationError({"detail": "Invalid credentials."})

        return tokens_for_user(user)
