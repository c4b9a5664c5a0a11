"""
Error taxonomy and the project-wide DRF exception handler.

Every failure leaving the HTTP layer is rendered as
``{"success": false, "error": "<message>", ...context}`` with the status
code of the originating exception.  Validation, authentication,
permission and not-found failures reuse DRF's own exception classes; the
two domain-specific cases live here.
"""
import logging

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class CapacityExceeded(APIException):
    """Raised when an RSVP would push an event past its capacity."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Event is at full capacity"
    default_code = "capacity_exceeded"

    def __init__(self, capacity, spots_remaining=0):
        super().__init__(self.default_detail)
        self.extra = {
            "message": f"This event has reached its maximum capacity of {capacity} attendees",
            "is_full": True,
            "capacity": capacity,
            "spots_remaining": spots_remaining,
        }


class StoreError(APIException):
    """The backing store failed; the underlying message is only exposed in DEBUG."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"
    default_code = "store_error"


def first_error_message(detail) -> str:
    """Flatten DRF's nested ``detail`` structures into a single readable message."""
    if isinstance(detail, dict):
        if not detail:
            return ""
        if "detail" in detail:
            return first_error_message(detail["detail"])
        field, value = next(iter(detail.items()))
        message = first_error_message(value)
        if field in ("non_field_errors", "error"):
            return message
        return f"{field}: {message}"
    if isinstance(detail, (list, tuple)):
        return first_error_message(detail[0]) if detail else ""
    return str(detail)


def envelope_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        logger.exception("Store error while handling %s", context.get("view").__class__.__name__)
        exc = StoreError(str(exc) if settings.DEBUG else None)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled error in %s", context.get("view").__class__.__name__, exc_info=exc)
        message = str(exc) if settings.DEBUG else "Server error"
        return Response(
            {"success": False, "error": message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {"success": False, "error": first_error_message(response.data)}
    if isinstance(exc, ValidationError) and isinstance(response.data, dict):
        payload["errors"] = response.data
    payload.update(getattr(exc, "extra", {}))
    response.data = payload
    return response
