"""Envelope, pagination and query-string helpers shared by all API views."""
from __future__ import annotations

import math
from datetime import date

from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

_MISSING = object()

MAX_PAGE_SIZE = 1000
# largest OFFSET the database backends accept (signed 64-bit)
MAX_OFFSET = 2**63 - 1


def success(data=_MISSING, *, message: str | None = None, pagination: dict | None = None,
            status_code: int = status.HTTP_200_OK, **extra) -> Response:
    """Build the `{"success": true, ...}` envelope the dashboard expects."""
    payload: dict = {"success": True}
    if data is not _MISSING:
        payload["data"] = data
    if message is not None:
        payload["message"] = message
    if pagination is not None:
        payload["pagination"] = pagination
    payload.update(extra)
    return Response(payload, status=status_code)


def failure(message: str, *, status_code: int = status.HTTP_400_BAD_REQUEST, **extra) -> Response:
    payload = {"success": False, "message": message}
    payload.update(extra)
    return Response(payload, status=status_code)


def parse_int_param(params, name: str, default: int | None = None, *,
                    minimum: int | None = None, maximum: int | None = None) -> int | None:
    """
    Read an integer from `request.query_params`.

    Blank values fall back to `default`; anything that is not an integer
    (or is outside the bounds) becomes a 400 through `ValidationError`.
    """
    raw = params.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValidationError({name: f"'{raw}' is not a valid integer."})
    if minimum is not None and value < minimum:
        raise ValidationError({name: f"Must be at least {minimum}."})
    if maximum is not None and value > maximum:
        raise ValidationError({name: f"Must be at most {maximum}."})
    return value


def parse_date_param(params, name: str) -> date | None:
    """Accept both `2024-03-01` and full ISO timestamps from JS `toISOString()`."""
    raw = params.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    raw = str(raw).strip()
    try:
        parsed_dt = parse_datetime(raw)
        if parsed_dt is not None:
            return parsed_dt.date()
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({name: f"'{raw}' is not a valid date (expected YYYY-MM-DD)."})
    return parsed


def paginate(queryset, params, *, default_limit: int) -> tuple:
    """
    Slice a queryset with `page`/`limit` from the query string.

    Returns the sliced queryset and the pagination block
    `{page, limit, total, totalPages}`. Pages past the end are simply empty.
    """
    page = parse_int_param(params, "page", 1, minimum=1)
    limit = parse_int_param(params, "limit", default_limit, minimum=1, maximum=MAX_PAGE_SIZE)
    offset = (page - 1) * limit
    if offset > MAX_OFFSET:
        raise ValidationError({"page": "Page number is too large."})
    total = queryset.count()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit),
    }
    return queryset[offset:offset + limit], pagination
