"""
URL patterns for the `climate` app.

`<climate_parameter:parameter>` only matches registered slugs, so
`/api/rainfall/` resolves while `/api/not-a-parameter/` is a plain 404.
"""
from django.urls import path, register_converter

from .parameters import ClimateParameterConverter
from .views import (
    ClimateExportView,
    ClimateRecordDetailView,
    ClimateRecordListView,
    ClimateSeriesView,
    ClimateStationListView,
    ClimateUploadView,
    ClimateYearListView,
    ParameterListView,
)

register_converter(ClimateParameterConverter, "climate_parameter")

urlpatterns = [
    path("parameters/", ParameterListView.as_view(), name="climate-parameters"),
    path("<climate_parameter:parameter>/", ClimateRecordListView.as_view(), name="climate-record-list"),
    path("<climate_parameter:parameter>/upload/", ClimateUploadView.as_view(), name="climate-upload"),
    path("<climate_parameter:parameter>/stations/", ClimateStationListView.as_view(), name="climate-stations"),
    path("<climate_parameter:parameter>/years/", ClimateYearListView.as_view(), name="climate-years"),
    path("<climate_parameter:parameter>/series/", ClimateSeriesView.as_view(), name="climate-series"),
    path(
        "<climate_parameter:parameter>/export/<str:file_format>/",
        ClimateExportView.as_view(),
        name="climate-export",
    ),
    path("<climate_parameter:parameter>/<int:pk>/", ClimateRecordDetailView.as_view(), name="climate-record-detail"),
]
