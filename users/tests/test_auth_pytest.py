import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken


def _create_user(**kwargs):
    User = get_user_model()
    defaults = {"username": "jdoe", "email": "jdoe@example.com", "password": "StrongPass123!"}
    defaults.update(kwargs)
    return User.objects.create_user(**defaults)


@pytest.mark.django_db
def test_login_and_profile_pytest():
    user = _create_user()
    client = APIClient()

    resp = client.post(
        "/api/v1/auth/signin/",
        {"identifier": "jdoe@example.com", "password": "StrongPass123!"},
        format="json",
    )
    assert resp.status_code == 200
    access = resp.data["access"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    profile = client.get("/api/v1/account/profile/")
    assert profile.status_code == 200
    assert profile.data["email"] == user.email
    assert profile.data["is_seller"] is False


@pytest.mark.django_db
def test_access_token_carries_seller_flag():
    _create_user(is_seller=True)
    client = APIClient()

    resp = client.post(
        "/api/v1/auth/signin/",
        {"identifier": "jdoe@example.com", "password": "StrongPass123!"},
        format="json",
    )
    assert resp.status_code == 200
    token = AccessToken(resp.data["access"])
    assert token["is_seller"] is True


@pytest.mark.django_db
def test_signin_sets_cookie_that_authenticates_requests():
    _create_user()
    client = APIClient()

    resp = client.post(
        "/api/v1/auth/signin/",
        {"identifier": "jdoe@example.com", "password": "StrongPass123!"},
        format="json",
    )
    assert resp.status_code == 200
    assert "accessToken" in resp.cookies

    # APIClient keeps cookies between requests; no Authorization header set
    profile = client.get("/api/v1/account/profile/")
    assert profile.status_code == 200


@pytest.mark.django_db
def test_missing_or_invalid_credentials_return_401():
    client = APIClient()
    assert client.get("/api/v1/account/profile/").status_code == 401

    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
    assert client.get("/api/v1/account/profile/").status_code == 401


@pytest.mark.django_db
def test_signin_rejects_wrong_password():
    _create_user()
    client = APIClient()
    resp = client.post(
        "/api/v1/auth/signin/",
        {"identifier": "jdoe@example.com", "password": "nope"},
        format="json",
    )
    assert resp.status_code == 400
