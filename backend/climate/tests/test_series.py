from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from climate.models import Rainfall
from climate.series import DAY_MS, epoch_millis, filter_points, record_points


class RecordPointsTests(SimpleTestCase):
    def test_flattens_days_and_skips_impossible_dates(self):
        feb = Rainfall(station="Gazipur", year=2023, month=2, day1=Decimal("1.5"), day28=Decimal("0"),
                       day30=Decimal("9"), day31=Decimal("9"))
        jan = Rainfall(station="Gazipur", year=2023, month=1, day31=Decimal("4"))

        points = record_points([feb, jan])

        self.assertEqual(
            points,
            [
                [epoch_millis(date(2023, 1, 31)), 4.0],
                [epoch_millis(date(2023, 2, 1)), 1.5],
                [epoch_millis(date(2023, 2, 28)), 0.0],
            ],
        )

    def test_epoch_millis_is_utc_midnight(self):
        self.assertEqual(epoch_millis(date(1970, 1, 2)), DAY_MS)


class FilterPointsTests(SimpleTestCase):
    def setUp(self):
        self.points = [[epoch_millis(date(2023, 1, day)), float(day)] for day in range(1, 32)]

    def test_all_returns_everything(self):
        self.assertEqual(filter_points(self.points, "All"), self.points)

    def test_range_counts_back_from_newest_point(self):
        week = filter_points(self.points, "1W")
        self.assertEqual([value for _, value in week], [24.0, 25.0, 26.0, 27.0, 28.0, 29.0, 30.0, 31.0])

    def test_unknown_range_falls_back_to_thirty_days(self):
        self.assertEqual(len(filter_points(self.points, "2W")), 31)
        self.assertEqual(filter_points(self.points, "2W")[0][1], 1.0)

    def test_custom_window_includes_whole_end_day(self):
        window = filter_points(self.points, "1D", start=date(2023, 1, 10), end=date(2023, 1, 12))
        self.assertEqual([value for _, value in window], [10.0, 11.0, 12.0])

    def test_empty_series(self):
        self.assertEqual(filter_points([], "1Y"), [])


class ClimateSeriesApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        Rainfall.objects.create(station="Gazipur", year=2023, month=1, day1=Decimal("2"), day2=Decimal("3"))
        Rainfall.objects.create(station="Rangpur", year=2023, month=1, day5=Decimal("7"))

    def test_series_per_station(self):
        resp = self.client.get("/api/rainfall/series/", {"station": ["Gazipur", "Rangpur"]})
        self.assertEqual(resp.status_code, 200)

        data = resp.json()["data"]
        self.assertEqual(
            data["Gazipur"],
            [[epoch_millis(date(2023, 1, 1)), 2.0], [epoch_millis(date(2023, 1, 2)), 3.0]],
        )
        self.assertEqual(data["Rangpur"], [[epoch_millis(date(2023, 1, 5)), 7.0]])
        self.assertEqual(resp.json()["parameter"]["unit"], "mm")

    def test_comma_separated_stations_and_custom_window(self):
        resp = self.client.get(
            "/api/rainfall/series/",
            {"stations": "Gazipur,Unknown", "startDate": "2023-01-02", "endDate": "2023-01-31"},
        )
        data = resp.json()["data"]
        self.assertEqual(data["Gazipur"], [[epoch_millis(date(2023, 1, 2)), 3.0]])
        self.assertEqual(data["Unknown"], [])

    def test_station_is_required(self):
        resp = self.client.get("/api/rainfall/series/")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
