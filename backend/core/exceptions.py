"""
Project-wide exception handler for DRF.

Every error leaves the API as `{"success": false, "message": ...}` so the
dashboard can show a toast without caring which view failed.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def first_error_message(detail) -> str:
    if isinstance(detail, dict):
        if "detail" in detail:
            return str(detail["detail"])
        for field, errors in detail.items():
            text = first_error_message(errors)
            return text if field == "non_field_errors" else f"{field}: {text}"
        return "Invalid request."
    if isinstance(detail, (list, tuple)):
        return first_error_message(detail[0]) if detail else "Invalid request."
    return str(detail)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s",
            view.__class__.__name__ if view is not None else "unknown view",
            exc_info=exc,
        )
        return Response(
            {"success": False, "message": str(exc) or "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = response.data
    payload = {"success": False, "message": first_error_message(detail)}
    if not (isinstance(detail, dict) and set(detail) == {"detail"}):
        payload["errors"] = detail
    response.data = payload
    return response
