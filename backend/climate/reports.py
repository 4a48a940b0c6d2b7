"""
CSV and PDF exports of a filtered climate table.

pandas builds the table (and the per station-month statistics), ReportLab
draws a plain text-only PDF summary that can be printed or shared.
"""
from __future__ import annotations

import math
from datetime import datetime
from io import BytesIO

import pandas as pd
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from .models import DAY_FIELDS
from .parameters import ClimateParameter

EXPORT_COLUMNS = ["station", "year", "month", *DAY_FIELDS]


def records_frame(queryset) -> pd.DataFrame:
    rows = []
    for values in queryset.values(*EXPORT_COLUMNS):
        for name in DAY_FIELDS:
            values[name] = float(values[name]) if values[name] is not None else math.nan
        rows.append(values)
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def summary_frame(df: pd.DataFrame) -> pd.DataFrame:
    """One line per station-month: days recorded, total, mean, min, max."""
    days = df[list(DAY_FIELDS)].astype(float)
    summary = df[["station", "year", "month"]].copy()
    summary["days"] = days.count(axis=1)
    summary["total"] = days.sum(axis=1, min_count=1)
    summary["mean"] = days.mean(axis=1)
    summary["min"] = days.min(axis=1)
    summary["max"] = days.max(axis=1)
    return summary


def build_csv(queryset) -> bytes:
    df = records_frame(queryset)
    return df.to_csv(index=False).encode("utf-8")


def _fmt(value) -> str:
    if value is None or pd.isna(value):
        return "-"
    return f"{value:.2f}"


def build_pdf(parameter: ClimateParameter, queryset, filters: dict | None = None) -> bytes:
    """
    Build a short, text-only PDF summary of the selected rows.

    The charts live in the dashboard; this file is the printable version of
    the numbers behind them.
    """
    summary = summary_frame(records_frame(queryset))

    buffer = BytesIO()
    pdf_canvas = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    y = height - 50

    pdf_canvas.setFont("Helvetica-Bold", 14)
    pdf_canvas.drawString(40, y, f"{parameter.label} Data Report ({parameter.unit})")
    y -= 25

    pdf_canvas.setFont("Helvetica", 10)
    pdf_canvas.drawString(40, y, f"Generated at: {datetime.now():%Y-%m-%d %H:%M:%S}")
    y -= 15
    active_filters = ", ".join(f"{key}={value}" for key, value in (filters or {}).items() if value)
    pdf_canvas.drawString(40, y, f"Filters: {active_filters or 'none'}")
    y -= 15
    pdf_canvas.drawString(40, y, f"Station-months: {len(summary)}")
    y -= 30

    columns = [("Station", 40), ("Year", 240), ("Month", 290), ("Days", 340),
               ("Total", 400), ("Mean", 480), ("Min", 560), ("Max", 640)]

    def draw_header(top: float) -> float:
        pdf_canvas.setFont("Helvetica-Bold", 10)
        for title, x in columns:
            pdf_canvas.drawString(x, top, title)
        pdf_canvas.setFont("Helvetica", 9)
        return top - 18

    if summary.empty:
        pdf_canvas.drawString(40, y, "No records match the selected filters.")
    else:
        y = draw_header(y)
        for line in summary.itertuples(index=False):
            if y < 50:
                pdf_canvas.showPage()
                y = draw_header(height - 50)
            cells = [
                str(line.station)[:36],
                str(line.year),
                f"{line.month:02d}",
                str(line.days),
                _fmt(line.total),
                _fmt(line.mean),
                _fmt(line.min),
                _fmt(line.max),
            ]
            for (_, x), text in zip(columns, cells):
                pdf_canvas.drawString(x, y, text)
            y -= 14

    pdf_canvas.showPage()
    pdf_canvas.save()
    return buffer.getvalue()
