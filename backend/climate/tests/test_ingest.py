from decimal import Decimal
from io import BytesIO

import pandas as pd
from django.test import SimpleTestCase, TestCase

from climate.ingest import (
    INVALID_PERIOD_ERROR,
    MISSING_FIELDS_ERROR,
    RowRejected,
    build_record_values,
    parse_numeric,
    parse_whole_number,
    read_table_file,
    upsert_rows,
)
from climate.models import Rainfall


class ParsingHelperTests(SimpleTestCase):
    def test_parse_numeric(self):
        self.assertEqual(parse_numeric("12.5"), Decimal("12.50"))
        self.assertEqual(parse_numeric(3), Decimal("3.00"))
        self.assertEqual(parse_numeric(0), Decimal("0.00"))
        self.assertEqual(parse_numeric(" 1.005 "), Decimal("1.01"))
        self.assertIsNone(parse_numeric(""))
        self.assertIsNone(parse_numeric(None))
        self.assertIsNone(parse_numeric("n/a"))
        self.assertIsNone(parse_numeric(float("nan")))
        self.assertIsNone(parse_numeric("inf"))

    def test_parse_whole_number(self):
        self.assertEqual(parse_whole_number("2021"), 2021)
        self.assertEqual(parse_whole_number(2021.0), 2021)
        self.assertEqual(parse_whole_number("7.0"), 7)
        self.assertEqual(parse_whole_number("2021-22"), 2021)
        self.assertIsNone(parse_whole_number("July"))
        self.assertIsNone(parse_whole_number(7.5))
        self.assertIsNone(parse_whole_number(""))

    def test_build_record_values_reads_alternate_headers(self):
        values = build_record_values(
            {"Stations": "  Gazipur ", "Fiscal Year": "2020", "MONTH": "2", "1": "0", "Day2": "4.2", "30": "9"}
        )
        self.assertEqual(values["station"], "Gazipur")
        self.assertEqual(values["year"], 2020)
        self.assertEqual(values["month"], 2)
        # zero is a reading, not a missing value
        self.assertEqual(values["day1"], Decimal("0.00"))
        self.assertEqual(values["day2"], Decimal("4.20"))
        self.assertEqual(values["day30"], Decimal("9.00"))
        self.assertIsNone(values["day3"])

    def test_build_record_values_rejects_missing_fields(self):
        with self.assertRaisesMessage(RowRejected, MISSING_FIELDS_ERROR):
            build_record_values({"Station": "Gazipur", "Year": 2020})
        with self.assertRaisesMessage(RowRejected, MISSING_FIELDS_ERROR):
            build_record_values({"Station": "   ", "Year": 2020, "Month": 1})

    def test_build_record_values_rejects_bad_period(self):
        with self.assertRaisesMessage(RowRejected, INVALID_PERIOD_ERROR):
            build_record_values({"Station": "Gazipur", "Year": 2020, "Month": 13})
        with self.assertRaisesMessage(RowRejected, INVALID_PERIOD_ERROR):
            build_record_values({"Station": "Gazipur", "Year": "abc", "Month": 1})
        for year in (0, 10000, "99999999999999999999"):
            with self.assertRaisesMessage(RowRejected, INVALID_PERIOD_ERROR):
                build_record_values({"Station": "Gazipur", "Year": year, "Month": 1})

    def test_build_record_values_rejects_values_too_large_for_column(self):
        with self.assertRaises(RowRejected):
            build_record_values({"Station": "Gazipur", "Year": 2020, "Month": 1, "1": "123456"})


class ReadTableFileTests(SimpleTestCase):
    def test_reads_csv_with_bom_and_blank_cells(self):
        content = "\ufeffStation,Year,Month,1,2\nGazipur,2021,1,3.5,\n,,,,\n".encode("utf-8")
        rows = read_table_file(BytesIO(content), "rain.csv")
        self.assertEqual(rows, [{"Station": "Gazipur", "Year": "2021", "Month": "1", "1": "3.5", "2": None}])

    def test_reads_xlsx(self):
        buffer = BytesIO()
        pd.DataFrame([{"Station": "Rangpur", "Year": 2022, "Month": 3, 1: 1.5}]).to_excel(
            buffer, index=False, engine="openpyxl"
        )
        buffer.seek(0)
        rows = read_table_file(buffer, "rain.xlsx")
        self.assertEqual(len(rows), 1)
        values = build_record_values(rows[0])
        self.assertEqual(values["station"], "Rangpur")
        self.assertEqual(values["year"], 2022)
        self.assertEqual(values["day1"], Decimal("1.50"))

    def test_rejects_unknown_extension(self):
        with self.assertRaises(ValueError):
            read_table_file(BytesIO(b"x"), "rain.json")


class UpsertRowsTests(TestCase):
    def test_creates_updates_and_reports_failures(self):
        Rainfall.objects.create(station="Gazipur", year=2021, month=1, day1=Decimal("1.00"))

        results = upsert_rows(
            Rainfall,
            [
                {"Station": "Gazipur", "Year": 2021, "Month": 1, "1": "5"},
                {"Station": "Barishal", "Year": 2021, "Month": 1, "1": "2"},
                {"Station": "Barishal", "Year": 2021},
            ],
        )

        self.assertEqual(results.total, 3)
        self.assertEqual(results.successful, 1)
        self.assertEqual(results.updated, 1)
        self.assertEqual(results.failed, 1)
        self.assertEqual(results.failed_details[0]["row"], 3)
        self.assertEqual(Rainfall.objects.count(), 2)
        self.assertEqual(Rainfall.objects.get(station="Gazipur").day1, Decimal("5.00"))

    def test_update_overwrites_every_day_column(self):
        Rainfall.objects.create(station="Gazipur", year=2021, month=1, day1=Decimal("1.00"), day2=Decimal("2.00"))
        upsert_rows(Rainfall, [{"Station": "Gazipur", "Year": 2021, "Month": 1, "1": "7"}])
        record = Rainfall.objects.get()
        self.assertEqual(record.day1, Decimal("7.00"))
        self.assertIsNone(record.day2)
