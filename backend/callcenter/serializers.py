"""Serializers for call detail records and CIS requests."""
from rest_framework import serializers
from rest_framework.settings import ISO_8601

from .models import CallDetailRecord, CISRequest

# Column names seen in PBX exports, mapped onto our field names.
CDR_FIELD_ALIASES = {
    "date": ("date", "calldate", "callDate", "Date"),
    "source": ("source", "src", "Source"),
    "destination": ("destination", "dst", "Destination"),
    "src_channel": ("src_channel", "channel", "srcChannel"),
    "dst_channel": ("dst_channel", "dstchannel", "dstChannel"),
    "status": ("status", "disposition", "Status"),
    "duration": ("duration", "billsec", "Duration"),
    "name": ("name", "location", "Location"),
    "address": ("address", "problem", "Problem"),
}


def normalise_cdr_row(row: dict) -> dict:
    """Pick our fields out of an uploaded row, whichever column names it uses."""
    values = {}
    for field_name, aliases in CDR_FIELD_ALIASES.items():
        for alias in aliases:
            value = row.get(alias)
            if value is not None and value != "":
                values[field_name] = value
                break
    return values


class CallDetailRecordSerializer(serializers.ModelSerializer):
    date = serializers.DateTimeField(input_formats=[ISO_8601, "%d/%m/%Y %H:%M:%S", "%d/%m/%Y %H:%M"])

    class Meta:
        model = CallDetailRecord
        fields = [
            "id",
            "date",
            "source",
            "destination",
            "src_channel",
            "dst_channel",
            "status",
            "duration",
            "name",
            "address",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_source(self, value: str) -> str:
        value = str(value).strip()
        if not value:
            raise serializers.ValidationError("Source is required.")
        return value

    def validate_status(self, value: str) -> str:
        return str(value).strip().upper()


class CallDetailRecordUpdateSerializer(serializers.ModelSerializer):
    """Operators can only annotate a call, not rewrite what the PBX logged."""

    class Meta:
        model = CallDetailRecord
        fields = ["name", "address", "status"]

    def validate_status(self, value: str) -> str:
        return str(value).strip().upper()


class CISRequestSerializer(serializers.ModelSerializer):
    """
    CIS requests in the shape the request form and the admin table use
    (camelCase keys, lists for the selections).
    """

    selectedStations = serializers.ListField(
        source="selected_stations", child=serializers.CharField(), allow_empty=False
    )
    selectedWeatherParameters = serializers.ListField(
        source="selected_weather_parameters", child=serializers.CharField(), allow_empty=False
    )
    selectedDataFormats = serializers.ListField(
        source="selected_data_formats", child=serializers.CharField(), required=False
    )
    timeInterval = serializers.CharField(source="time_interval", required=False, allow_blank=True)
    dataInterval = serializers.CharField(source="data_interval", required=False, allow_blank=True)
    startDate = serializers.DateField(source="start_date", required=False, allow_null=True)
    endDate = serializers.DateField(source="end_date", required=False, allow_null=True)
    submitTime = serializers.DateTimeField(source="submit_time", read_only=True)

    class Meta:
        model = CISRequest
        fields = [
            "id",
            "name",
            "designation",
            "organization",
            "address",
            "mobile",
            "email",
            "selectedStations",
            "selectedWeatherParameters",
            "selectedDataFormats",
            "timeInterval",
            "dataInterval",
            "startDate",
            "endDate",
            "status",
            "remarks",
            "submitTime",
        ]
        # new requests always start out Pending; the status route changes them
        read_only_fields = ["id", "status", "remarks"]

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"endDate": "End date cannot be before start date."})
        return attrs


class CISStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[CISRequest.Status.APPROVED, CISRequest.Status.REJECTED],
        error_messages={"invalid_choice": "Status must be Approved or Rejected."},
    )
    remarks = serializers.CharField(required=False, allow_blank=True, default="")
