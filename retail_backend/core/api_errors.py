# core/api_errors.py

"""
API ERROR NORMALIZATION

Service errors (core.exceptions) are rendered as:

    {"error": {"code": "<CODE>", "message": "<human readable>"}}

Model-level guards (django ValidationError) map to VALIDATION_ERROR.
Everything else is delegated to DRF's default handler, so serializer
validation errors keep DRF's field-keyed shape.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import RetailServiceError

logger = logging.getLogger(__name__)


def error_response(*, code: str, message: str, http_status: int) -> Response:
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def exception_handler(exc, context):
    if isinstance(exc, RetailServiceError):
        view = context.get("view")
        logger.info(
            "Service error returned to client",
            extra={
                "code": exc.code,
                "view": view.__class__.__name__ if view is not None else None,
            },
        )
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
        )

    if isinstance(exc, DjangoValidationError):
        return error_response(
            code="VALIDATION_ERROR",
            message="; ".join(exc.messages),
            http_status=400,
        )

    return drf_exception_handler(exc, context)
