"""Aggregate user routes under /api/v1/: `auth/` for JWTs, `account/` for profile and registration."""

from django.urls import include, path

from .views import current_user, register, register_resend_otp, register_verify

account_urlpatterns = [
    path("profile/", current_user, name="profile"),
    path("register/", register, name="register"),
    path("register/verify/", register_verify, name="register_verify"),
    path("register/resend-otp/", register_resend_otp, name="register_resend_otp"),
]

urlpatterns = [
    path("auth/", include("users.auth_urls")),
    path("account/", include(account_urlpatterns)),
]
