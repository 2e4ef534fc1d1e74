"""DRF exception handler shaping every API error as ``{"message": ...}``."""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from eventhub.utils.errors import DomainError
from eventhub.utils.errors import ErrorCode

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_EVENT_CREATOR: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_ATTENDING: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_DATE_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMAIL_ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.UPLOAD_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

VALIDATION_FAILED = "Validation failed"
INVALID_QUERY = "Invalid query parameters"
INTERNAL_ERROR = "Internal server error"


class InvalidQueryError(ValidationError):
    """Query string validation failed; reported apart from body validation."""

    summary = INVALID_QUERY


def flatten_errors(detail: Any, field: str = "") -> list[dict[str, str]]:
    """Turn DRF's nested error detail into ``[{"field", "message"}]`` pairs.

    Nested paths are dotted, e.g. ``imagesUrl.1`` for the second list item.
    """
    if isinstance(detail, dict):
        errors: list[dict[str, str]] = []
        for key, value in detail.items():
            errors.extend(flatten_errors(value, f"{field}.{key}" if field else str(key)))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, item in enumerate(detail):
            if isinstance(item, (dict, list)):
                path = f"{field}.{index}" if field else str(index)
                errors.extend(flatten_errors(item, path))
            else:
                errors.append({"field": field, "message": str(item)})
        return errors
    return [{"field": field, "message": str(detail)}]


def _first_message(data: Any) -> str:
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        data = next(iter(data.values()), "")
    if isinstance(data, list):
        return str(data[0]) if data else ""
    return str(data)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    if isinstance(exc, DomainError):
        http_status = DOMAIN_ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
        return Response({"message": exc.message}, status=http_status)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s",
            type(view).__name__ if view is not None else "api",
            exc_info=exc,
        )
        return Response(
            {"message": INTERNAL_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            "message": getattr(exc, "summary", VALIDATION_FAILED),
            "errors": flatten_errors(exc.detail),
        }
    else:
        response.data = {"message": _first_message(response.data)}
    return response
