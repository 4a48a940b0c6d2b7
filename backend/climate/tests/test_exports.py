import csv
import io
from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from climate.models import Rainfall
from climate.parameters import PARAMETERS
from climate.reports import build_pdf, records_frame, summary_frame


class ClimateExportTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        Rainfall.objects.create(station="Gazipur", year=2023, month=1, day1=Decimal("2"), day2=Decimal("4"))
        Rainfall.objects.create(station="Rangpur", year=2023, month=1)

    def test_summary_statistics(self):
        summary = summary_frame(records_frame(Rainfall.objects.order_by("station")))
        gazipur = summary.iloc[0]
        self.assertEqual(gazipur["days"], 2)
        self.assertEqual(gazipur["total"], 6.0)
        self.assertEqual(gazipur["mean"], 3.0)
        self.assertEqual(gazipur["min"], 2.0)
        self.assertEqual(gazipur["max"], 4.0)
        self.assertEqual(summary.iloc[1]["days"], 0)

    def test_csv_export_honours_filters(self):
        resp = self.client.get("/api/rainfall/export/csv/", {"station": "Gazipur"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "text/csv")
        self.assertIn("attachment;", resp["Content-Disposition"])

        rows = list(csv.DictReader(io.StringIO(resp.content.decode("utf-8"))))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["station"], "Gazipur")
        self.assertEqual(float(rows[0]["day2"]), 4.0)
        self.assertEqual(rows[0]["day3"], "")

    def test_pdf_export(self):
        resp = self.client.get("/api/rainfall/export/pdf/", {"year": 2023})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_pdf_for_empty_selection(self):
        content = build_pdf(PARAMETERS["rainfall"], Rainfall.objects.none())
        self.assertTrue(content.startswith(b"%PDF"))

    def test_unknown_format(self):
        resp = self.client.get("/api/rainfall/export/docx/")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
