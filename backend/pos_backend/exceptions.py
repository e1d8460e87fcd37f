"""
Base exception hierarchy for the POS core and the DRF exception handler that
maps it onto HTTP responses.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PosCoreError(Exception):
    """Base exception for pricing, cart, order and procurement errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "pos_error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RemoteServiceError(PosCoreError):
    """Raised when an external service call fails or is rejected."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_code = "remote_error"

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message, details=details)
        self.remote_status = status_code


def pos_exception_handler(exc, context):
    """
    Custom exception handler that renders PosCoreError subclasses with their
    own status code and a stable error shape.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if not isinstance(exc, PosCoreError):
        return None

    request = context.get("request")
    path = request.path if request is not None else ""
    if exc.status_code >= 500:
        logger.error(f"POS API error on {path}: {exc.__class__.__name__}: {exc.message}")
    else:
        logger.info(f"POS API rejection on {path}: {exc.__class__.__name__}: {exc.message}")

    return Response(
        {
            "error": {
                "code": exc.default_code,
                "message": exc.message,
                "details": exc.details,
            }
        },
        status=exc.status_code,
    )
