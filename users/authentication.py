"""JWT authentication accepting the bearer header or the access-token cookie."""

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """Authenticate with `Authorization: Bearer <jwt>`, falling back to a cookie.

    Browsers that signed in through `/auth/signin/` carry the access token in
    an httpOnly cookie; API clients send the header.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if not raw_token:
            return None
        validated_token = self.get_validated_token(raw_token.encode("utf-8"))
        return self.get_user(validated_token), validated_token
