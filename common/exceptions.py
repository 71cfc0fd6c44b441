"""Domain error taxonomy and the DRF exception handler that renders it.

Services raise these exceptions before mutating anything; views stay thin and
let `api_exception_handler` translate them into responses.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("marketplace.errors")


class DomainError(Exception):
    """Base class for business-rule failures with an HTTP mapping."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    code = "error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    default_detail = "Invalid input."
    code = "validation_error"


class AuthenticationError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided."
    code = "authentication_error"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    code = "authorization_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    code = "not_found"


class StateConflictError(DomainError):
    default_detail = "Operation not allowed in the current state."
    code = "state_conflict"


class InquiryFinalizedError(StateConflictError):
    default_detail = "Inquiry cannot be negotiated further as it is already finalized."
    code = "inquiry_finalized"


class InsufficientStockError(DomainError):
    default_detail = "Insufficient stock available."
    code = "insufficient_stock"


class CapacityExceededError(DomainError):
    default_detail = "Not enough space in the warehouse."
    code = "capacity_exceeded"


class SelfOrderForbiddenError(AuthorizationError):
    default_detail = "Store owners cannot order from their own store."
    code = "self_order_forbidden"


class PaymentNotCompletedError(DomainError):
    default_detail = "Payment not completed."
    code = "payment_not_completed"


class UpstreamProcessorError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Payment processor error."
    code = "upstream_processor_error"


def api_exception_handler(exc, context):
    """Render domain errors; hide unexpected failures behind a generic 500."""

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error(
                "domain_error",
                extra={"error": exc.code, "detail": exc.detail, "view": _view_name(context)},
            )
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        return response

    logger.exception("unhandled_exception", extra={"view": _view_name(context)})
    return Response({"detail": "Internal server error."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _view_name(context) -> str:
    view = (context or {}).get("view")
    return type(view).__name__ if view is not None else ""
