"""URL patterns for the call center app (mounted under /api/)."""
from django.urls import path

from .views import (
    CallDetailRecordDetailView,
    CallDetailRecordListView,
    CallDetailRecordUploadView,
    CallReportView,
    CISMonthlyStatsView,
    CISRequestDetailView,
    CISRequestListView,
    CISRequestStatusView,
)

urlpatterns = [
    path("cdr/", CallDetailRecordListView.as_view(), name="cdr-list"),
    path("cdr/upload/", CallDetailRecordUploadView.as_view(), name="cdr-upload"),
    path("cdr/report/all/", CallReportView.as_view(), name="cdr-report"),
    path("cdr/<int:pk>/", CallDetailRecordDetailView.as_view(), name="cdr-detail"),
    path("cis/", CISRequestListView.as_view(), name="cis-list"),
    path("cis/monthly-stats/", CISMonthlyStatsView.as_view(), name="cis-monthly-stats"),
    path("cis/<int:pk>/", CISRequestDetailView.as_view(), name="cis-detail"),
    path("cis/<int:pk>/status/", CISRequestStatusView.as_view(), name="cis-status"),
]
