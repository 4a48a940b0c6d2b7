"""
API views for the climate parameter tables.

Every view receives the `parameter` URL kwarg already resolved to a
`ClimateParameter` (see `ClimateParameterConverter`), so one set of views
serves rainfall, temperatures, humidity and the rest.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Q
from django.http import HttpResponse
from django.utils.timezone import now
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.views import APIView

from core.responses import failure, paginate, parse_date_param, parse_int_param, success

from .ingest import read_table_file, upsert_rows
from .parameters import PARAMETERS
from .reports import build_csv, build_pdf
from .serializers import serializer_for
from .series import filter_points, record_points

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

SORT_FIELDS = {
    "year": ("year", "month"),
    "month": ("month",),
    "station": ("station",),
    "id": ("id",),
    "created_at": ("created_at",),
    "createdAt": ("created_at",),
    "updated_at": ("updated_at",),
    "updatedAt": ("updated_at",),
}


def filtered_records(parameter, params):
    """Apply the station/year/month/date-range filters from the query string."""
    queryset = parameter.model.objects.all()

    station = (params.get("station") or "").strip()
    if station:
        queryset = queryset.filter(station=station)

    year = parse_int_param(params, "year", minimum=1, maximum=9999)
    if year is not None:
        queryset = queryset.filter(year=year)

    month = parse_int_param(params, "month", minimum=1, maximum=12)
    if month is not None:
        queryset = queryset.filter(month=month)

    # Date ranges are compared at month granularity: rows are station-months.
    start = parse_date_param(params, "startDate")
    if start is not None:
        queryset = queryset.filter(
            Q(year__gt=start.year) | Q(year=start.year, month__gte=start.month)
        )
    end = parse_date_param(params, "endDate")
    if end is not None:
        queryset = queryset.filter(
            Q(year__lt=end.year) | Q(year=end.year, month__lte=end.month)
        )
    return queryset


def ordered_records(queryset, params):
    sort_by = params.get("sortBy") or "year"
    if sort_by not in SORT_FIELDS:
        raise ValidationError({"sortBy": f"Cannot sort by '{sort_by}'."})
    sort_order = (params.get("sortOrder") or "DESC").upper()
    if sort_order not in ("ASC", "DESC"):
        raise ValidationError({"sortOrder": "Must be ASC or DESC."})

    prefix = "-" if sort_order == "DESC" else ""
    return queryset.order_by(*(prefix + name for name in SORT_FIELDS[sort_by]), "id")


def get_record(parameter, pk):
    record = parameter.model.objects.filter(pk=pk).first()
    if record is None:
        raise NotFound("Record not found")
    return record


class ParameterListView(APIView):
    """Parameter metadata for the dashboard drop-downs and chart colours."""

    def get(self, request, *args, **kwargs):
        return success([parameter.as_dict() for parameter in PARAMETERS.values()])


class ClimateUploadView(APIView):
    """
    Bulk upload of station-month rows.

    The dashboard posts `{"data": [...]}` with rows it already parsed; the
    desktop client and scripts may post the CSV/XLSX itself as `file`.
    """

    def post(self, request, parameter, *args, **kwargs):
        upload = request.FILES.get("file")
        if upload is not None:
            try:
                rows = read_table_file(upload, upload.name)
            except Exception as exc:  # noqa: BLE001
                # pandas/openpyxl raise a zoo of exception types for broken files;
                # all of them mean the same thing to the user.
                logger.warning("Could not read %s upload %s: %s", parameter.slug, upload.name, exc)
                return failure(f"Could not read the uploaded file: {exc}")
        elif isinstance(request.data, list):
            rows = request.data
        else:
            rows = request.data.get("data")

        if not isinstance(rows, list) or not rows:
            return failure("No data provided or invalid format")

        logger.info("Received %d %s rows", len(rows), parameter.slug)
        results = upsert_rows(parameter.model, rows)
        return success(message="Upload completed", results=results.as_dict())


class ClimateRecordListView(APIView):
    def get(self, request, parameter, *args, **kwargs):
        params = request.query_params
        queryset = ordered_records(filtered_records(parameter, params), params)
        page, pagination = paginate(queryset, params, default_limit=DEFAULT_PAGE_SIZE)
        serializer = serializer_for(parameter.model)(page, many=True)
        return success(serializer.data, pagination=pagination)

    def post(self, request, parameter, *args, **kwargs):
        serializer = serializer_for(parameter.model)(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            serializer.save()
        logger.info("Created %s record %s", parameter.slug, serializer.instance)
        return success(serializer.data, status_code=status.HTTP_201_CREATED)


class ClimateStationListView(APIView):
    def get(self, request, parameter, *args, **kwargs):
        stations = (
            parameter.model.objects.order_by("station")
            .values_list("station", flat=True)
            .distinct()
        )
        return success(list(stations))


class ClimateYearListView(APIView):
    def get(self, request, parameter, *args, **kwargs):
        years = (
            parameter.model.objects.order_by("-year")
            .values_list("year", flat=True)
            .distinct()
        )
        return success(list(years))


class ClimateRecordDetailView(APIView):
    def get(self, request, parameter, pk, *args, **kwargs):
        record = get_record(parameter, pk)
        return success(serializer_for(parameter.model)(record).data)

    def put(self, request, parameter, pk, *args, **kwargs):
        record = get_record(parameter, pk)
        serializer = serializer_for(parameter.model)(record, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            serializer.save()
        logger.info("Updated %s record %s", parameter.slug, pk)
        return success(serializer.data)

    patch = put

    def delete(self, request, parameter, pk, *args, **kwargs):
        record = get_record(parameter, pk)
        record.delete()
        logger.info("Deleted %s record %s", parameter.slug, pk)
        return success(message="Record deleted successfully")


class ClimateSeriesView(APIView):
    """
    Daily points for the historical charts, one series per station.

    `?station=A&station=B&range=1Y` or `?stations=A,B&startDate=...&endDate=...`
    """

    def get(self, request, parameter, *args, **kwargs):
        params = request.query_params
        stations = [name.strip() for name in params.getlist("station") if name.strip()]
        stations += [name.strip() for name in (params.get("stations") or "").split(",") if name.strip()]
        if not stations:
            raise ValidationError({"station": "At least one station is required."})

        range_key = params.get("range") or "All"
        start = parse_date_param(params, "startDate")
        end = parse_date_param(params, "endDate")

        data = {}
        for station in dict.fromkeys(stations):
            records = parameter.model.objects.filter(station=station).order_by("year", "month")
            data[station] = filter_points(record_points(records), range_key, start=start, end=end)
        return success(data, parameter=parameter.as_dict())


class ClimateExportView(APIView):
    """Download the filtered rows as CSV or as a short PDF report."""

    def get(self, request, parameter, file_format, *args, **kwargs):
        params = request.query_params
        queryset = ordered_records(filtered_records(parameter, params), params)
        timestamp = now().strftime("%Y%m%d_%H%M%S")
        base_name = f"{parameter.slug}_{timestamp}"

        if file_format == "csv":
            response = HttpResponse(build_csv(queryset), content_type="text/csv")
            response["Content-Disposition"] = f'attachment; filename="{base_name}.csv"'
            return response

        if file_format == "pdf":
            filters = {name: params.get(name) for name in ("station", "year", "month", "startDate", "endDate")}
            response = HttpResponse(build_pdf(parameter, queryset, filters), content_type="application/pdf")
            response["Content-Disposition"] = f'attachment; filename="{base_name}.pdf"'
            return response

        return failure(f"Unsupported export format '{file_format}'. Use csv or pdf.")
