"""
Registry of the climate parameters the dashboard knows about.

The slug is what shows up in the URL (`/api/rainfall/`), the label/unit/colour
are what the charts use. Models are looked up lazily through the app registry
so this module can be imported from `urls.py` without touching the ORM.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from django.apps import apps


@dataclass(frozen=True)
class ClimateParameter:
    slug: str
    label: str
    unit: str
    color: str
    model_name: str

    @property
    def model(self):
        return apps.get_model("climate", self.model_name)

    @property
    def display_label(self) -> str:
        return f"{self.label} ({self.unit})"

    def as_dict(self) -> dict:
        return {
            "value": self.slug,
            "label": self.display_label,
            "name": self.label,
            "unit": self.unit,
            "color": self.color,
        }


PARAMETERS: dict[str, ClimateParameter] = {
    parameter.slug: parameter
    for parameter in (
        ClimateParameter("maximum-temp", "Maximum Temperature", "°C", "#ef4444", "MaximumTemperature"),
        ClimateParameter("minimum-temp", "Minimum Temperature", "°C", "#3b82f6", "MinimumTemperature"),
        ClimateParameter("rainfall", "Rainfall", "mm", "#06b6d4", "Rainfall"),
        ClimateParameter("relative-humidity", "Relative Humidity", "%", "#8b5cf6", "RelativeHumidity"),
        ClimateParameter("sunshine", "Sunshine", "hrs", "#f59e0b", "Sunshine"),
        ClimateParameter("wind-speed", "Wind Speed", "m/s", "#10b981", "WindSpeed"),
        ClimateParameter("soil-moisture", "Soil Moisture", "%", "#84cc16", "SoilMoisture"),
        ClimateParameter("soil-temperature", "Soil Temperature", "°C", "#f97316", "SoilTemperature"),
        ClimateParameter("average-temperature", "Average Temperature", "°C", "#ec4899", "AverageTemperature"),
        ClimateParameter("solar-radiation", "Solar Radiation", "W/m²", "#eab308", "SolarRadiation"),
        ClimateParameter("evapo-transpiration", "Evapo Transpiration", "mm", "#14b8a6", "EvapoTranspiration"),
    )
}


class ClimateParameterConverter:
    """URL converter that only matches registered slugs and yields the parameter."""

    regex = "|".join(re.escape(slug) for slug in PARAMETERS)

    def to_python(self, value: str) -> ClimateParameter:
        return PARAMETERS[value]

    def to_url(self, value) -> str:
        if isinstance(value, ClimateParameter):
            return value.slug
        return str(value)
