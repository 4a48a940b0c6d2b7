from datetime import datetime
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from callcenter.models import CallDetailRecord


def make_call(day: int, status="ANSWERED", duration=45, destination="16123", source="01711000000", **extra):
    return CallDetailRecord.objects.create(
        date=timezone.make_aware(datetime(2024, 5, day, 10, 0)),
        source=source,
        destination=destination,
        status=status,
        duration=duration,
        **extra,
    )


class CallDetailRecordListTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        for day in range(1, 13):
            make_call(day, status="ANSWERED" if day % 3 else "NO ANSWER")

    def test_newest_first_with_default_page_size(self):
        resp = self.client.get("/api/cdr/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body["data"]), 10)
        self.assertEqual(body["pagination"], {"page": 1, "limit": 10, "total": 12, "totalPages": 2})
        self.assertTrue(body["data"][0]["date"].startswith("2024-05-12"))

    def test_status_and_date_filters(self):
        resp = self.client.get(
            "/api/cdr/",
            {"status": "no answer", "startDate": "2024-05-04", "endDate": "2024-05-09"},
        )
        days = [row["date"][:10] for row in resp.json()["data"]]
        self.assertEqual(days, ["2024-05-09", "2024-05-06"])

    def test_destination_contains(self):
        make_call(20, destination="09678333")
        resp = self.client.get("/api/cdr/", {"destination": "678"})
        self.assertEqual(resp.json()["pagination"]["total"], 1)


class CallDetailRecordUploadTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_upload_breakdown(self):
        rows = [
            {"calldate": "2024-06-01 08:15:00", "src": "01712000000", "dst": "16123", "disposition": "answered",
             "billsec": "75"},
            {"date": "2024-06-01T09:00:00", "source": "01813000000", "status": "BUSY"},
            {"date": "2024-06-01T09:05:00", "destination": "16123"},
            {"source": "01914000000"},
        ]
        resp = self.client.post("/api/cdr/upload/", {"data": rows}, format="json")

        self.assertEqual(resp.status_code, 200)
        results = resp.json()["results"]
        self.assertEqual((results["total"], results["successful"], results["failed"]), (4, 2, 2))
        self.assertEqual([failure["row"] for failure in results["details"]["failed"]], [3, 4])

        first = CallDetailRecord.objects.get(source="01712000000")
        self.assertEqual(first.status, "ANSWERED")
        self.assertEqual(first.duration, 75)

    def test_database_error_fails_only_its_row(self):
        real_save = CallDetailRecord.save

        def save(record, *args, **kwargs):
            if record.source == "01813000000":
                raise DatabaseError("value too long for column")
            return real_save(record, *args, **kwargs)

        rows = [
            {"date": "2024-06-01T09:00:00", "source": "01712000000", "status": "ANSWERED"},
            {"date": "2024-06-01T09:05:00", "source": "01813000000", "status": "BUSY"},
        ]
        with mock.patch.object(CallDetailRecord, "save", save):
            resp = self.client.post("/api/cdr/upload/", {"data": rows}, format="json")

        self.assertEqual(resp.status_code, 200)
        results = resp.json()["results"]
        self.assertEqual((results["successful"], results["failed"]), (1, 1))
        failure = results["details"]["failed"][0]
        self.assertEqual(failure["row"], 2)
        self.assertEqual(failure["error"], "value too long for column")
        self.assertEqual(list(CallDetailRecord.objects.values_list("source", flat=True)), ["01712000000"])

    def test_empty_upload(self):
        resp = self.client.post("/api/cdr/upload/", {"data": []}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "No data provided or invalid format")


class CallDetailRecordDetailTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.call = make_call(3, status="NO ANSWER")

    def test_patch_only_touches_operator_fields(self):
        resp = self.client.patch(
            f"/api/cdr/{self.call.pk}/",
            {"name": "Rangpur", "address": "Brown plant hopper attack", "source": "000"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.call.refresh_from_db()
        self.assertEqual(self.call.name, "Rangpur")
        self.assertEqual(self.call.address, "Brown plant hopper attack")
        self.assertEqual(self.call.source, "01711000000")

    def test_delete_and_missing(self):
        self.assertEqual(self.client.delete(f"/api/cdr/{self.call.pk}/").status_code, 200)
        resp = self.client.get(f"/api/cdr/{self.call.pk}/")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "message": "Call record not found"})


class CallReportTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_empty_report(self):
        body = self.client.get("/api/cdr/report/all/").json()
        self.assertEqual(body["totalCall"], 0)
        self.assertEqual(body["successRate"], 0)
        self.assertEqual(body["totalDuration"], 0)
        self.assertEqual(body["durationRanges"]["180+"], 0)
        self.assertEqual(body["last10History"], [])

    def test_report_numbers(self):
        make_call(1, duration=30, destination="16123")
        make_call(2, duration=31, destination="16123")
        make_call(3, status="NO ANSWER", duration=0, destination="09678")
        make_call(4, status="BUSY", duration=181, destination="16123")
        make_call(5, status="FAILED", duration=120)
        make_call(6, duration=180, destination="09678")

        body = self.client.get("/api/cdr/report/all/").json()

        self.assertEqual(body["totalCall"], 6)
        self.assertEqual(body["totalAnswer"], 3)
        self.assertEqual(body["totalNoAnswer"], 1)
        self.assertEqual(body["totalBusy"], 2)
        self.assertEqual(body["totalDuration"], 542)
        self.assertEqual(body["successRate"], 50.0)
        self.assertEqual(
            body["durationRanges"],
            {"0-30": 2, "31-60": 1, "61-90": 0, "91-120": 1, "121-180": 1, "180+": 1},
        )
        self.assertEqual(body["destinationStats"][0], {"destination": "16123", "totalCalls": 4})
        self.assertEqual(len(body["last10History"]), 6)
        self.assertTrue(body["last10History"][0]["date"].startswith("2024-05-06"))

    def test_last_ten_only(self):
        for day in range(1, 15):
            make_call(day)
        history = self.client.get("/api/cdr/report/all/").json()["last10History"]
        self.assertEqual(len(history), 10)
        self.assertTrue(history[-1]["date"].startswith("2024-05-05"))
