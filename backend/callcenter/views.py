"""
API views for the call center: CDR browsing/annotation and the CIS
request workflow.
"""
from __future__ import annotations

import logging

from django.db import DatabaseError, transaction
from django.db.models import Q
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from core.exceptions import first_error_message
from core.responses import failure, paginate, parse_date_param, success

from .models import CallDetailRecord, CISRequest
from .reports import call_report, cis_monthly_stats
from .serializers import (
    CallDetailRecordSerializer,
    CallDetailRecordUpdateSerializer,
    CISRequestSerializer,
    CISStatusSerializer,
    normalise_cdr_row,
)

logger = logging.getLogger(__name__)

CDR_PAGE_SIZE = 10


def _get_or_404(model, pk, message):
    try:
        return model.objects.get(pk=pk)
    except model.DoesNotExist:
        raise NotFound(message)


class CallDetailRecordListView(APIView):
    """
    GET /api/cdr/?status=&source=&destination=&startDate=&endDate=&page=&limit=

    Newest calls first, ten per page unless `limit` says otherwise.
    """

    def get(self, request, *args, **kwargs):
        params = request.query_params
        queryset = CallDetailRecord.objects.all()

        call_status = (params.get("status") or "").strip()
        if call_status:
            queryset = queryset.filter(status__iexact=call_status)
        source = (params.get("source") or "").strip()
        if source:
            queryset = queryset.filter(source__icontains=source)
        destination = (params.get("destination") or "").strip()
        if destination:
            queryset = queryset.filter(destination__icontains=destination)

        start = parse_date_param(params, "startDate")
        end = parse_date_param(params, "endDate")
        if start:
            queryset = queryset.filter(date__date__gte=start)
        if end:
            queryset = queryset.filter(date__date__lte=end)

        page, pagination = paginate(queryset.order_by("-date", "-id"), params, default_limit=CDR_PAGE_SIZE)
        return success(CallDetailRecordSerializer(page, many=True).data, pagination=pagination)


class CallDetailRecordUploadView(APIView):
    """Bulk import of PBX rows posted as `{"data": [...]}`."""

    def post(self, request, *args, **kwargs):
        rows = request.data if isinstance(request.data, list) else request.data.get("data")
        if not isinstance(rows, list) or not rows:
            return failure("No data provided or invalid format")

        created, failed = [], []
        for row_number, row in enumerate(rows, start=1):
            if not isinstance(row, dict):
                failed.append({"row": row_number, "error": "Row is not an object", "data": row})
                continue
            serializer = CallDetailRecordSerializer(data=normalise_cdr_row(row))
            if not serializer.is_valid():
                failed.append({"row": row_number, "error": first_error_message(serializer.errors), "data": row})
                continue
            try:
                with transaction.atomic():
                    serializer.save()
            except (DatabaseError, OverflowError) as exc:
                logger.warning("CDR row %d rejected: %s", row_number, exc)
                failed.append({"row": row_number, "error": str(exc), "data": row})
                continue
            created.append(serializer.instance.pk)

        logger.info("CDR upload finished: total=%d created=%d failed=%d", len(rows), len(created), len(failed))
        return success(
            message="Upload completed",
            results={
                "total": len(rows),
                "successful": len(created),
                "failed": len(failed),
                "details": {"success": created, "failed": failed},
            },
        )


class CallDetailRecordDetailView(APIView):
    def get(self, request, pk, *args, **kwargs):
        record = _get_or_404(CallDetailRecord, pk, "Call record not found")
        return success(CallDetailRecordSerializer(record).data)

    def patch(self, request, pk, *args, **kwargs):
        record = _get_or_404(CallDetailRecord, pk, "Call record not found")
        serializer = CallDetailRecordUpdateSerializer(record, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated call record %s: %s", pk, sorted(serializer.validated_data))
        return success(CallDetailRecordSerializer(record).data, message="Call record updated")

    def delete(self, request, pk, *args, **kwargs):
        record = _get_or_404(CallDetailRecord, pk, "Call record not found")
        record.delete()
        logger.info("Deleted call record %s", pk)
        return success(message="Call record deleted successfully")


class CallReportView(APIView):
    """The numbers behind the dashboard cards, returned at the top level."""

    def get(self, request, *args, **kwargs):
        return success(**call_report())


class CISRequestListView(APIView):
    def get(self, request, *args, **kwargs):
        params = request.query_params
        queryset = CISRequest.objects.all()

        request_status = (params.get("status") or "").strip()
        if request_status:
            queryset = queryset.filter(status__iexact=request_status)
        search = (params.get("search") or "").strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(organization__icontains=search) | Q(mobile__icontains=search)
            )

        return success(CISRequestSerializer(queryset, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = CISRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("New CIS request %s from %s", serializer.instance.pk, serializer.instance.mobile)
        return success(
            serializer.data,
            message="Request submitted successfully",
            status_code=status.HTTP_201_CREATED,
        )


class CISRequestDetailView(APIView):
    def get(self, request, pk, *args, **kwargs):
        cis_request = _get_or_404(CISRequest, pk, "Request not found")
        return success(CISRequestSerializer(cis_request).data)

    def delete(self, request, pk, *args, **kwargs):
        cis_request = _get_or_404(CISRequest, pk, "Request not found")
        cis_request.delete()
        logger.info("Deleted CIS request %s", pk)
        return success(message="Request deleted successfully")


class CISRequestStatusView(APIView):
    """Approve or reject a pending request; decided requests stay decided."""

    def put(self, request, pk, *args, **kwargs):
        cis_request = _get_or_404(CISRequest, pk, "Request not found")
        serializer = CISStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if cis_request.status != CISRequest.Status.PENDING:
            return failure(f"Request has already been {cis_request.status.lower()}")

        cis_request.status = serializer.validated_data["status"]
        cis_request.remarks = serializer.validated_data["remarks"]
        cis_request.save(update_fields=["status", "remarks", "updated_at"])
        logger.info("CIS request %s marked %s", pk, cis_request.status)
        return success(
            CISRequestSerializer(cis_request).data,
            message=f"Request {cis_request.status.lower()} successfully",
        )


class CISMonthlyStatsView(APIView):
    def get(self, request, *args, **kwargs):
        return success(cis_monthly_stats())
