"""
HTTP and file helpers for the desktop client.

Kept free of any Qt imports so they can run inside worker threads and be
tested without a display.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
import requests

API_BASE_URL = os.environ.get("AGROMET_API_URL", "http://127.0.0.1:8000/api").rstrip("/")
TIMEOUT = 60

RANGE_CHOICES = ["1M", "3M", "6M", "1Y", "5Y", "10Y", "All"]

Auth = Optional[Tuple[str, str]]


class ApiError(Exception):
    """The server answered, but not with what we asked for."""


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"


def _payload(response: requests.Response) -> Dict[str, Any]:
    if response.status_code >= 400:
        raise ApiError(_error_message(response))
    data = response.json()
    if isinstance(data, dict) and data.get("success") is False:
        raise ApiError(data.get("message") or "Request failed")
    return data


def fetch_parameters(auth: Auth = None) -> List[Dict[str, Any]]:
    response = requests.get(f"{API_BASE_URL}/parameters/", auth=auth, timeout=TIMEOUT)
    return _payload(response)["data"]


def fetch_stations(slug: str, auth: Auth = None) -> List[str]:
    response = requests.get(f"{API_BASE_URL}/{slug}/stations/", auth=auth, timeout=TIMEOUT)
    return _payload(response)["data"]


def fetch_series(slug: str, station: str, range_key: str = "All", auth: Auth = None) -> List[List[float]]:
    """Daily `[epoch_ms, value]` points for one station."""
    response = requests.get(
        f"{API_BASE_URL}/{slug}/series/",
        params={"station": station, "range": range_key},
        auth=auth,
        timeout=TIMEOUT,
    )
    return _payload(response)["data"].get(station, [])


def read_rows(file_path: str) -> List[Dict[str, Any]]:
    """
    Parse a CSV/XLSX sheet into row dicts, the same way the web dashboard
    does before posting: headers trimmed, empty rows dropped, blanks as None.
    Everything stays a string; the server does the number parsing.
    """
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(file_path, dtype=str, encoding="utf-8-sig")
    elif suffix == ".xlsx":
        df = pd.read_excel(file_path, dtype=str, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file type '{suffix}'. Use .csv or .xlsx.")

    df.columns = [str(column).strip() for column in df.columns]
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict("records")


def upload_rows(slug: str, rows: List[Dict[str, Any]], auth: Auth = None) -> Dict[str, Any]:
    response = requests.post(
        f"{API_BASE_URL}/{slug}/upload/",
        json={"data": rows},
        auth=auth,
        timeout=TIMEOUT,
    )
    return _payload(response)["results"]


def format_results(results: Dict[str, Any], max_failures: int = 5) -> str:
    """Short text summary of an upload breakdown for the status panel."""
    created = results.get("successful", 0)
    updated = results.get("updated", 0)
    failed = results.get("failed", 0)
    lines = [
        f"Rows in file: {results.get('total', 0)}",
        f"Created: {created}",
        f"Updated: {updated}",
        f"Failed: {failed}",
    ]
    failures = results.get("details", {}).get("failed", [])
    for failure in failures[:max_failures]:
        lines.append(f"  row {failure.get('row')}: {failure.get('error')}")
    if len(failures) > max_failures:
        lines.append(f"  ... and {len(failures) - max_failures} more")
    return "\n".join(lines)


def series_frame(points: List[List[float]]) -> pd.DataFrame:
    """Points as a DataFrame indexed by date, ready for matplotlib."""
    df = pd.DataFrame(points, columns=["timestamp", "value"])
    df.index = pd.to_datetime(df["timestamp"], unit="ms")
    return df[["value"]]
