"""
Aggregates behind the call center dashboard cards.

Everything is computed in the database with one `aggregate()` call, plus a
grouped query for the destinations and the ten newest calls.
"""
from __future__ import annotations

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncMonth

from .models import CallDetailRecord, CISRequest
from .serializers import CallDetailRecordSerializer

# (label, lowest second, highest second); None means open-ended
DURATION_RANGES = (
    ("0-30", 0, 30),
    ("31-60", 31, 60),
    ("61-90", 61, 90),
    ("91-120", 91, 120),
    ("121-180", 121, 180),
    ("180+", 181, None),
)


def _duration_filter(low: int, high: int | None) -> Q:
    condition = Q(duration__gte=low)
    if high is not None:
        condition &= Q(duration__lte=high)
    return condition


def call_report(queryset=None) -> dict:
    """Totals, success rate, duration buckets, busiest destinations and the last ten calls."""
    if queryset is None:
        queryset = CallDetailRecord.objects.all()

    aggregates = {
        "totalCall": Count("id"),
        "totalAnswer": Count("id", filter=Q(status__iexact=CallDetailRecord.ANSWERED)),
        "totalNoAnswer": Count("id", filter=Q(status__iexact=CallDetailRecord.NO_ANSWER)),
        # the dashboard shows busy and failed calls as one slice
        "totalBusy": Count(
            "id",
            filter=Q(status__iexact=CallDetailRecord.BUSY) | Q(status__iexact=CallDetailRecord.FAILED),
        ),
        "totalDuration": Sum("duration"),
    }
    for index, (_, low, high) in enumerate(DURATION_RANGES):
        aggregates[f"range_{index}"] = Count("id", filter=_duration_filter(low, high))

    totals = queryset.aggregate(**aggregates)
    total_calls = totals["totalCall"]

    destination_stats = (
        queryset.values("destination")
        .annotate(totalCalls=Count("id"))
        .order_by("-totalCalls", "destination")
    )
    newest = queryset.order_by("-date", "-id")[:10]

    return {
        "totalCall": total_calls,
        "totalAnswer": totals["totalAnswer"],
        "totalNoAnswer": totals["totalNoAnswer"],
        "totalBusy": totals["totalBusy"],
        "totalDuration": totals["totalDuration"] or 0,
        "successRate": round(totals["totalAnswer"] * 100 / total_calls, 2) if total_calls else 0,
        "durationRanges": {
            label: totals[f"range_{index}"] for index, (label, _, _) in enumerate(DURATION_RANGES)
        },
        "destinationStats": list(destination_stats),
        "last10History": CallDetailRecordSerializer(newest, many=True).data,
    }


def cis_monthly_stats(months: int = 12) -> list[dict]:
    """Requests per submit month, oldest first, for the last `months` months that have any."""
    rows = (
        CISRequest.objects.annotate(month=TruncMonth("submit_time"))
        .values("month")
        .annotate(
            total=Count("id"),
            approved=Count("id", filter=Q(status=CISRequest.Status.APPROVED)),
            rejected=Count("id", filter=Q(status=CISRequest.Status.REJECTED)),
            pending=Count("id", filter=Q(status=CISRequest.Status.PENDING)),
        )
        .order_by("-month")[:months]
    )
    stats = [
        {
            "month": row["month"].strftime("%Y-%m"),
            "total": row["total"],
            "approved": row["approved"],
            "rejected": row["rejected"],
            "pending": row["pending"],
        }
        for row in rows
    ]
    stats.reverse()
    return stats
