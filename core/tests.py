import logging
from unittest.mock import patch

from django.db import OperationalError
from django.test import RequestFactory, TestCase
from django.urls import reverse

from core.api import api_view
from core.errors import ConflictError, InvalidInputError


@api_view(["POST"])
def _conflict(request):
    raise ConflictError("Occupé")


@api_view(["GET"])
def _invalid(request):
    raise InvalidInputError("Mauvais champ", field="date")


@api_view(["GET"])
def _broken(request):
    raise RuntimeError("boom")


@api_view(["GET"])
def _store_down(request):
    raise OperationalError("(2006, 'MySQL server has gone away')")


class ApiViewTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_conflict_is_409_retryable(self):
        response = _conflict(self.factory.post("/x"))
        self.assertEqual(response.status_code, 409)
        self.assertIn(b'"retryable": true', response.content)

    def test_invalid_input_names_the_field(self):
        response = _invalid(self.factory.get("/x"))
        self.assertEqual(response.status_code, 400)
        self.assertIn(b'"field": "date"', response.content)

    def test_operational_error_is_503(self):
        response = _store_down(self.factory.get("/x"))
        self.assertEqual(response.status_code, 503)
        self.assertIn(b"STORE_UNAVAILABLE", response.content)

    def test_unexpected_error_is_logged_and_reraised(self):
        with self.assertLogs("core.api", level=logging.ERROR) as logs:
            with self.assertRaises(RuntimeError):
                _broken(self.factory.get("/x"))
        self.assertIn("Unhandled error on GET /x", logs.output[0])

    def test_method_not_allowed(self):
        response = _conflict(self.factory.get("/x"))
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response["Allow"], "POST")

    def test_bad_json_body(self):
        response = self.client.post(reverse("accounts:login"), data="{oops", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "INVALID_INPUT")


class CoreViewTests(TestCase):
    def test_home(self):
        response = self.client.get(reverse("core:home"))
        self.assertEqual(response.status_code, 200)
        self.assertIn("Bienvenue", response.json()["message"])

    def test_health(self):
        self.assertEqual(self.client.get(reverse("core:health")).json(), {"status": "ok"})

    def test_trainers_lists_catalogue_coaches(self):
        trainers = self.client.get(reverse("core:trainers")).json()["trainers"]
        by_name = {t["name"]: t["courses"] for t in trainers}
        self.assertEqual(by_name["Paul"], ["Boxe"])
        self.assertEqual(len(by_name), 6)

    def test_health_reports_store_outage(self):
        with patch("core.views.connection") as conn:
            conn.cursor.side_effect = OperationalError("timeout")
            response = self.client.get(reverse("core:health"))
        self.assertEqual(response.status_code, 503)
