import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app


class HttpHardeningTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()

    def test_health_has_security_headers_and_request_id(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

        self.assertEqual(response.headers.get("x-content-type-options"), "nosniff")
        self.assertEqual(response.headers.get("x-frame-options"), "DENY")
        self.assertEqual(response.headers.get("referrer-policy"), "no-referrer")
        self.assertEqual(response.headers.get("cache-control"), "no-store")

        request_id = response.headers.get("x-request-id")
        self.assertIsNotNone(request_id)
        self.assertRegex(str(request_id), r"^[A-Za-z0-9._-]{1,128}$")

    def test_valid_request_id_is_preserved(self):
        external_request_id = "release-check-2026_02_23"
        response = self.client.get("/health", headers={"X-Request-ID": external_request_id})
        self.assertEqual(response.headers.get("x-request-id"), external_request_id)

    def test_invalid_request_id_is_replaced(self):
        bad_request_id = "bad id with spaces"
        response = self.client.get("/health", headers={"X-Request-ID": bad_request_id})
        response_request_id = response.headers.get("x-request-id")
        self.assertNotEqual(response_request_id, bad_request_id)
        self.assertRegex(str(response_request_id), r"^[A-Za-z0-9._-]{1,128}$")

    def test_error_response_keeps_security_headers(self):
        response = self.client.post("/api/public/submissions/validate", json={"fields": []})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.headers.get("x-frame-options"), "DENY")
        self.assertIsNotNone(response.headers.get("x-request-id"))

    def test_docs_are_served_without_csp(self):
        response = self.client.get("/docs")
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.headers.get("content-security-policy"))
        self.assertEqual(response.headers.get("x-content-type-options"), "nosniff")

    def test_requests_are_logged(self):
        with self.assertLogs("app.http", level="INFO") as logs:
            self.client.post("/api/forms/layout/validate", json={"fields": []})
        self.assertTrue(any("POST /api/forms/layout/validate status=200" in line for line in logs.output))

    def test_health_checks_are_not_logged_by_default(self):
        with self.assertNoLogs("app.http", level="INFO"):
            response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)

    def test_health_checks_logged_when_enabled(self):
        with patch.object(settings, "LOG_HEALTH_CHECKS", True):
            with self.assertLogs("app.http", level="INFO") as logs:
                self.client.get("/health")
        self.assertTrue(any("GET /health status=200" in line for line in logs.output))

    def test_schema_errors_carry_request_id(self):
        with self.assertLogs("app.http", level="INFO") as logs:
            response = self.client.post(
                "/api/public/submissions/validate",
                json={"fields": []},
                headers={"X-Request-ID": "schema-check-1"},
            )
        self.assertEqual(response.status_code, 422)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "Schema Validation Error")
        self.assertEqual(detail["request_id"], "schema-check-1")
        self.assertEqual(response.headers.get("x-request-id"), "schema-check-1")
        self.assertTrue(any("schema rejected path=/api/public/submissions/validate" in line for line in logs.output))

    def test_landing_reports_version(self):
        body = self.client.get("/").json()
        self.assertEqual(body["service"], settings.APP_NAME)
        self.assertEqual(body["version"], settings.APP_VERSION)


if __name__ == "__main__":
    unittest.main()
