from django.contrib import admin

from .models import CallDetailRecord, CISRequest


@admin.register(CallDetailRecord)
class CallDetailRecordAdmin(admin.ModelAdmin):
    list_display = ("date", "source", "destination", "status", "duration", "name")
    list_filter = ("status",)
    search_fields = ("source", "destination", "name", "address")
    date_hierarchy = "date"


@admin.register(CISRequest)
class CISRequestAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "mobile", "status", "submit_time")
    list_filter = ("status",)
    search_fields = ("name", "organization", "mobile", "email")
    readonly_fields = ("submit_time", "updated_at")
