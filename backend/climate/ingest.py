"""
Bulk import of station-month rows into the climate tables.

Rows come either as JSON objects parsed by the dashboard (PapaParse/XLSX on
the browser side) or from a CSV/XLSX file read here with pandas. Column names
are taken the way the field spreadsheets spell them: `Station`/`Stations`,
`Year`/`Fiscal Year`, `Month` and one column per day (`1`..`31` or `Day1`..).
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import pandas as pd
from django.db import DatabaseError, transaction

from .models import DAY_FIELDS

logger = logging.getLogger(__name__)

STATION_KEYS = ("Stations", "Station", "station", "STATION")
YEAR_KEYS = ("Year", "year", "YEAR", "Fiscal Year")
MONTH_KEYS = ("Month", "month", "MONTH")

MISSING_FIELDS_ERROR = "Missing required fields: Station, Year, or Month"
INVALID_PERIOD_ERROR = "Invalid year or month value"

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")
STATION_MAX_LENGTH = 100
# decimal(7, 2) columns
DAY_VALUE_LIMIT = Decimal("100000")
YEAR_RANGE = (1, 9999)
TWO_PLACES = Decimal("0.01")

_FISCAL_YEAR_RE = re.compile(r"^(\d{4})\s*[-/]\s*\d{2,4}$")


class RowRejected(ValueError):
    """Raised for a row that cannot be imported; the message goes to the report."""


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def first_present(row: dict, keys) -> object | None:
    """Return the first non-blank value among `keys` (0 counts as a value)."""
    for key in keys:
        value = row.get(key)
        if not _is_blank(value):
            return value
    return None


def parse_numeric(value) -> Decimal | None:
    """Coerce a day reading to a 2-decimal value; anything unreadable is None."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return Decimal(str(number)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_whole_number(value) -> int | None:
    """
    Read a year or month.

    Spreadsheets hand us `2021`, `"2021"`, `2021.0` or a fiscal year like
    `"2021-22"` (the first year is used).
    """
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        match = _FISCAL_YEAR_RE.match(text)
        return int(match.group(1)) if match else None
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return None


def _day_keys(day: int) -> tuple:
    return (str(day), day, f"Day{day}", f"day{day}")


def build_record_values(row: dict) -> dict:
    """Turn one uploaded row into model field values, or raise `RowRejected`."""
    if not isinstance(row, dict):
        raise RowRejected("Row must be an object with column names")

    station = first_present(row, STATION_KEYS)
    year_raw = first_present(row, YEAR_KEYS)
    month_raw = first_present(row, MONTH_KEYS)
    if station is None or year_raw is None or month_raw is None:
        raise RowRejected(MISSING_FIELDS_ERROR)

    station = str(station).strip()
    if len(station) > STATION_MAX_LENGTH:
        raise RowRejected(f"Station name is longer than {STATION_MAX_LENGTH} characters")

    year = parse_whole_number(year_raw)
    month = parse_whole_number(month_raw)
    if year is None or month is None or not 1 <= month <= 12 or not YEAR_RANGE[0] <= year <= YEAR_RANGE[1]:
        raise RowRejected(INVALID_PERIOD_ERROR)

    values: dict = {"station": station, "year": year, "month": month}
    for day, name in enumerate(DAY_FIELDS, start=1):
        reading = parse_numeric(first_present(row, _day_keys(day)))
        if reading is not None and abs(reading) >= DAY_VALUE_LIMIT:
            raise RowRejected(f"Value out of range for {name}: {reading}")
        values[name] = reading
    return values


@dataclass
class UploadResults:
    """Per-upload breakdown returned to the dashboard."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    updated: int = 0
    success_details: list = field(default_factory=list)
    failed_details: list = field(default_factory=list)
    updated_details: list = field(default_factory=list)

    def record_created(self, key: dict) -> None:
        self.successful += 1
        self.success_details.append(key)

    def record_updated(self, key: dict) -> None:
        self.updated += 1
        self.updated_details.append(key)

    def record_failure(self, row_number: int, error: str, data) -> None:
        self.failed += 1
        self.failed_details.append({"row": row_number, "error": error, "data": data})

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "updated": self.updated,
            "details": {
                "success": self.success_details,
                "failed": self.failed_details,
                "updated": self.updated_details,
            },
        }


def upsert_rows(model, rows: list) -> UploadResults:
    """
    Create or update one record per row, keyed by (station, year, month).

    Each row runs in its own savepoint so a database error on one row does
    not undo the others.
    """
    results = UploadResults(total=len(rows))

    for row_number, row in enumerate(rows, start=1):
        try:
            values = build_record_values(row)
            key = {name: values[name] for name in ("station", "year", "month")}
            with transaction.atomic():
                record = model.objects.filter(**key).first()
                if record is None:
                    model.objects.create(**values)
                    results.record_created(key)
                else:
                    for name, value in values.items():
                        setattr(record, name, value)
                    record.save()
                    results.record_updated(key)
        except (RowRejected, DatabaseError, OverflowError) as exc:
            logger.warning("%s row %d rejected: %s", model.__name__, row_number, exc)
            results.record_failure(row_number, str(exc), row)

    logger.info(
        "%s upload finished: total=%d created=%d updated=%d failed=%d",
        model.__name__,
        results.total,
        results.successful,
        results.updated,
        results.failed,
    )
    return results


def read_table_file(file_obj, filename: str) -> list[dict]:
    """
    Read a CSV or XLSX upload into a list of row dicts.

    Empty cells become None and fully empty lines are dropped, so the rows
    look exactly like the ones the browser would have posted.
    """
    extension = Path(filename).suffix.lower()
    if extension == ".csv":
        df = pd.read_csv(file_obj, dtype=str, encoding="utf-8-sig")
    elif extension == ".xlsx":
        df = pd.read_excel(file_obj, engine="openpyxl")
    else:
        raise ValueError(
            f"Unsupported file type '{extension or filename}'. "
            f"Use one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    # Excel exports like to sneak in a BOM or padded headers.
    df.columns = [str(column).strip().lstrip("\ufeff") for column in df.columns]
    df = df.dropna(how="all")
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")
