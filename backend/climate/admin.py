from django.contrib import admin

from .parameters import PARAMETERS


class DailyClimateRecordAdmin(admin.ModelAdmin):
    list_display = ("station", "year", "month", "updated_at")
    list_filter = ("year", "month")
    search_fields = ("station",)
    ordering = ("-year", "-month", "station")


for _parameter in PARAMETERS.values():
    admin.site.register(_parameter.model, DailyClimateRecordAdmin)
