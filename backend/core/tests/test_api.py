from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.http import QueryDict
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient, APIRequestFactory
from rest_framework.views import APIView

from core.responses import parse_date_param, parse_int_param


class HealthAndLoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(
            username="01712345678",
            password="s3cret-pass",
            first_name="Nusrat",
            last_name="Jahan",
        )

    def test_health(self):
        resp = self.client.get("/api/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True, "message": "Server is running"})

    def test_login_with_mobile_number(self):
        resp = self.client.post(
            "/api/auth/login/",
            {"mobileNumber": "01712345678", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["id"], self.user.id)
        self.assertEqual(body["user"]["name"], "Nusrat Jahan")

    def test_wrong_password(self):
        resp = self.client.post(
            "/api/auth/login/",
            {"mobileNumber": "01712345678", "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"success": False, "message": "Invalid mobile number or password"})

    def test_missing_mobile_number(self):
        resp = self.client.post("/api/auth/login/", {"password": "s3cret-pass"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        self.assertIn("mobileNumber", resp.json()["errors"])


class ExplodingView(APIView):
    def get(self, request):
        raise RuntimeError("database went away")


class ExceptionHandlerTests(SimpleTestCase):
    def test_unhandled_errors_become_500_envelope(self):
        request = APIRequestFactory().get("/boom/")
        with self.assertLogs("core.exceptions", level="ERROR"):
            response = ExplodingView.as_view()(request)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"success": False, "message": "database went away"})


class QueryHelperTests(SimpleTestCase):
    def test_int_param_bounds(self):
        params = QueryDict("limit=5&page=abc")
        self.assertEqual(parse_int_param(params, "limit", 10, minimum=1), 5)
        self.assertEqual(parse_int_param(params, "missing", 10), 10)
        with self.assertRaises(ValidationError):
            parse_int_param(params, "page")
        with self.assertRaises(ValidationError):
            parse_int_param(params, "limit", maximum=3)

    def test_date_param_accepts_js_timestamps(self):
        params = QueryDict("a=2024-03-01&b=2024-03-01T18:00:00.000Z&c=soon")
        self.assertEqual(str(parse_date_param(params, "a")), "2024-03-01")
        self.assertEqual(str(parse_date_param(params, "b")), "2024-03-01")
        self.assertIsNone(parse_date_param(params, "d"))
        with self.assertRaises(ValidationError):
            parse_date_param(params, "c")
