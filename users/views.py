"""Users app API views.

Endpoints include:
- profile: returns the current authenticated user's profile.
- register: validates a registration and emails a one-time code.
- register/verify: confirms the code and creates the account.
- register/resend-otp: issues a fresh code for a pending registration.
- signin/refresh/verify/signout: JWT lifecycle; signin also sets the
  access-token cookie and signout clears it.
"""

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView, TokenVerifyView

from .logging import log_auth_event
from .otp import OtpError
from .serializers import (
    EmailOrPhoneTokenObtainPairSerializer,
    RegistrationSerializer,
    RegistrationVerifySerializer,
    ResendOtpSerializer,
    SignOutSerializer,
    UserMeSerializer,
    tokens_for_user,
)
from .services import RegistrationError, begin_registration, complete_registration, resend_registration_otp


def _set_auth_cookie(response: Response, access: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        access,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="Strict",
    )


@extend_schema(
    operation_id="users_current_user",
    summary="Get current user profile",
    description=(
        "Returns the current authenticated user's profile.\n\n"
        "Auth: JWT via `Authorization: Bearer <token>` or the access-token cookie.\n\n"
        "Errors: 401 if authentication credentials are missing or invalid."
    ),
    tags=["User Endpoints"],
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def current_user(request):
    """Return the authenticated user's basic profile fields."""
    log_auth_event("profile", request, user=request.user)
    return Response(UserMeSerializer(request.user).data)


current_user.throttle_scope = "profile"


@extend_schema(tags=["User Endpoints"], request=RegistrationSerializer)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register(request):
    """Validate a registration and send the verification code by email."""
    serializer = RegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        log_auth_event("register", request, status="invalid")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    begin_registration(serializer.validated_data)
    log_auth_event("register", request, status="otp_sent", extra={"email": serializer.validated_data["email"]})
    return Response({"detail": "Verification code sent."}, status=status.HTTP_202_ACCEPTED)


register.throttle_scope = "register"


@extend_schema(tags=["User Endpoints"], request=RegistrationVerifySerializer)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register_verify(request):
    """Confirm the code, create the account and sign it in."""
    serializer = RegistrationVerifySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        user = complete_registration(
            email=serializer.validated_data["email"],
            code=serializer.validated_data["otp"],
        )
    except (OtpError, RegistrationError) as exc:
        log_auth_event("register_verify", request, status="invalid")
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    tokens = tokens_for_user(user)
    log_auth_event("register_verify", request, user=user, status="success")
    response = Response({**tokens, "user": UserMeSerializer(user).data}, status=status.HTTP_201_CREATED)
    _set_auth_cookie(response, tokens["access"])
    return response


register_verify.throttle_scope = "register"


@extend_schema(tags=["User Endpoints"], request=ResendOtpSerializer)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register_resend_otp(request):
    """Send a new code; response is generic to prevent enumeration."""
    serializer = ResendOtpSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        resend_registration_otp(serializer.validated_data["email"])
        log_auth_event("register_resend_otp", request, status="sent")
    except OtpError:
        log_auth_event("register_resend_otp", request, status="not_found")
    return Response({"detail": "If a registration is pending, a new code has been sent."})


register_resend_otp.throttle_scope = "register"


class SignOutView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signout"
    permission_classes = [AllowAny]

    @extend_schema(tags=["User Endpoints"], request=SignOutSerializer)
    def post(self, request):
        refresh = request.data.get("refresh")
        if not refresh:
            return Response({"detail": "Refresh token is required."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            RefreshToken(refresh).blacklist()
        except TokenError:
            log_auth_event("signout", request, status="invalid_token")
            return Response({"detail": "Invalid token."}, status=status.HTTP_400_BAD_REQUEST)
        log_auth_event("signout", request, status="success")
        response = Response({"detail": "Signed out."}, status=status.HTTP_205_RESET_CONTENT)
        response.delete_cookie(settings.AUTH_COOKIE_NAME)
        return response


class SignInView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"
    serializer_class = EmailOrPhoneTokenObtainPairSerializer

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        if resp.status_code == 200:
            _set_auth_cookie(resp, resp.data["access"])
        log_auth_event("signin", request, status=status_label)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_refresh", request, status=status_label)
        return resp


class VerifyView(TokenVerifyView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_verify"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_verify", request, status=status_label)
        return resp
