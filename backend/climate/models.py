"""
Climate measurement tables.

All parameters share the same layout, so the columns live on one abstract
model and each parameter only contributes its table name. A row holds one
station-month; `day1`..`day31` are the daily readings (blank when missing or
when the month is shorter).
"""
from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

DAY_FIELDS = tuple(f"day{day}" for day in range(1, 32))


class DailyClimateRecord(models.Model):
    station = models.CharField(max_length=100, help_text="Weather station name")
    year = models.IntegerField(help_text="Year of record")
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)],
        help_text="Month (1-12)",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-year", "-month", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["station", "year", "month"],
                name="%(app_label)s_%(class)s_station_year_month",
            )
        ]

    def day_values(self) -> list:
        return [getattr(self, name) for name in DAY_FIELDS]

    def __str__(self) -> str:  # type: ignore[override]
        return f"{self.station} {self.year}-{self.month:02d}"


# 31 identical nullable columns; added in a loop instead of spelling them out.
for _name in DAY_FIELDS:
    DailyClimateRecord.add_to_class(
        _name,
        models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True),
    )
del _name


class MaximumTemperature(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "maximum_temperatures"
        verbose_name = "maximum temperature record"


class MinimumTemperature(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "minimum_temperatures"
        verbose_name = "minimum temperature record"


class Rainfall(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "rainfalls"
        verbose_name = "rainfall record"


class RelativeHumidity(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "relative_humidities"
        verbose_name = "relative humidity record"


class Sunshine(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "sunshines"
        verbose_name = "sunshine record"


class WindSpeed(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "wind_speeds"
        verbose_name = "wind speed record"


class SoilMoisture(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "soil_moistures"
        verbose_name = "soil moisture record"


class SoilTemperature(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "soil_temperatures"
        verbose_name = "soil temperature record"


class AverageTemperature(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "average_temperatures"
        verbose_name = "average temperature record"


class SolarRadiation(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "solar_radiations"
        verbose_name = "solar radiation record"


class EvapoTranspiration(DailyClimateRecord):
    class Meta(DailyClimateRecord.Meta):
        db_table = "evapo_transpirations"
        verbose_name = "evapo-transpiration record"
