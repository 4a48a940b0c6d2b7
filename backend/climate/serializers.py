"""Serializers for the climate parameter tables."""
from __future__ import annotations

from functools import lru_cache

from rest_framework import serializers

from .models import DAY_FIELDS

RECORD_FIELDS = ("id", "station", "year", "month", *DAY_FIELDS, "created_at", "updated_at")


class DailyClimateRecordSerializer(serializers.ModelSerializer):
    """
    Base serializer shared by every parameter table.

    The concrete classes are generated by `serializer_for()` since the only
    thing that changes between them is `Meta.model`.
    """

    def validate_station(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Station is required.")
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        model = self.Meta.model
        key = {
            name: attrs.get(name, getattr(self.instance, name, None))
            for name in ("station", "year", "month")
        }
        duplicates = model.objects.filter(**key)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError(
                f"A record for {key['station']} {key['year']}-{key['month']:02d} already exists."
            )
        return attrs


@lru_cache(maxsize=None)
def serializer_for(model) -> type[DailyClimateRecordSerializer]:
    meta = type(
        "Meta",
        (),
        {
            "model": model,
            "fields": RECORD_FIELDS,
            "read_only_fields": ("id", "created_at", "updated_at"),
            # Uniqueness is checked in `validate()` with a friendlier message.
            "validators": [],
        },
    )
    return type(f"{model.__name__}Serializer", (DailyClimateRecordSerializer,), {"Meta": meta})
