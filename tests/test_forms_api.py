import unittest
from datetime import datetime, timezone

from fastapi.testclient import TestClient

from app.main import app


def _field(label, field_type, position, **extra):
    field = {"label": label, "fieldType": field_type, "required": extra.pop("required", False), "position": position}
    field.update(extra)
    return field


NAME = _field("Name", "single-line-text", "A1", required=True, validation={"minLength": 1, "maxLength": 50})
EMAIL = _field(
    "Email",
    "email",
    "A2",
    required=True,
    validation={"emailPolicy": "allowed-domains", "allowedDomains": ["x.com"]},
)
AGE = _field("Age", "number", "B1", validation={"min": 0, "max": 120})


class FormsApiBase(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()


class LayoutCheckApiTests(FormsApiBase):
    def test_valid_layout(self):
        response = self.client.post(
            "/api/forms/layout/validate",
            json={"fields": [{"position": "A1"}, {"position": "A2"}, {"position": "B1"}]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"valid": True, "errors": [], "field_errors": {}})

    def test_invalid_layout_is_reported_not_rejected(self):
        response = self.client.post(
            "/api/forms/layout/validate",
            json={"fields": [{"position": "A1", "label": "Name", "fieldType": "textarea"}, {"position": "C1"}]},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["valid"])
        self.assertEqual(body["errors"], ["Gap in rows: missing row B. Rows must be contiguous (found row A and row C)."])


class FormValidateApiTests(FormsApiBase):
    def test_valid_form_returns_normalized_fields(self):
        response = self.client.post(
            "/api/forms/validate",
            json={"name": "Signup", "description": "Event signup", "fields": [NAME, EMAIL, AGE]},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["status"])
        self.assertEqual(body["name"], "Signup")
        self.assertEqual([field["position"] for field in body["fields"]], ["A1", "A2", "B1"])
        self.assertNotIn("placeholder", body["fields"][0])

    def test_previous_name_produces_versioned_name(self):
        response = self.client.post(
            "/api/forms/validate",
            json={"name": "Signup", "description": "d", "fields": [NAME], "previousName": "Signup-2"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Signup-3")

    def test_layout_errors_return_400(self):
        response = self.client.post(
            "/api/forms/validate",
            json={"name": "Signup", "description": "d", "fields": [NAME, dict(EMAIL, position="A1")]},
        )
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "Position Validation Error")
        self.assertEqual(detail["errors"], ['Duplicate position "A1" found. Each field must have a unique position.'])

    def test_malformed_position_returns_400_from_layout_validator(self):
        response = self.client.post(
            "/api/forms/validate",
            json={"name": "Signup", "description": "d", "fields": [dict(NAME, position="A9")]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('Invalid position format "A9" for field "Name"', response.json()["detail"]["message"])

    def test_schema_errors_return_422(self):
        response = self.client.post(
            "/api/forms/validate",
            json={"name": "Signup", "description": "d", "fields": [dict(AGE, validation={"min": 0})]},
        )
        self.assertEqual(response.status_code, 422)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "Schema Validation Error")
        self.assertEqual(len(detail["errors"]), 1)
        self.assertTrue(detail["errors"][0].startswith("fields.0: "))
        self.assertIn('Field "Age": validation for number needs max', detail["errors"][0])

        response = self.client.post("/api/forms/validate", json={"name": "Signup", "description": "d", "fields": []})
        self.assertEqual(response.status_code, 422)


class PublicSubmissionApiTests(FormsApiBase):
    def test_valid_submission_returns_normalized_data(self):
        response = self.client.post(
            "/api/public/submissions/validate",
            json={"fields": [NAME, EMAIL, AGE], "data": {"name": "Ann", "email": "a@x.com", "referrer": "ads"}},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": True, "data": {"name": "Ann", "email": "a@x.com"}})

    def test_invalid_submission_returns_all_errors(self):
        response = self.client.post(
            "/api/public/submissions/validate",
            json={"fields": [NAME, EMAIL, AGE], "data": {"email": "a@y.com", "age": "200"}},
        )
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "Validation Error")
        self.assertEqual(
            detail["errors"],
            [
                "Name is required",
                "Email must be from one of the allowed domains: x.com",
                "Age must be at most 120",
            ],
        )
        self.assertEqual(set(detail["field_errors"]), {"name", "email", "age"})


class SubmissionExportApiTests(FormsApiBase):
    def test_export_returns_csv_attachment(self):
        response = self.client.post(
            "/api/forms/submissions/export",
            json={
                "name": "Signup-2",
                "fields": [{"label": "Name"}, {"label": "Age"}],
                "submissions": [
                    {"submittedAt": "2024-03-05T14:07:09.123Z", "data": {"name": "a,b", "age": 30}},
                    {"submittedAt": datetime(2024, 3, 6, tzinfo=timezone.utc).isoformat(), "data": {}},
                ],
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/csv"))
        self.assertIn('filename="Signup-2-submissions.csv"', response.headers["content-disposition"])
        self.assertEqual(
            response.text,
            'Submitted At,Name,Age\n2024-03-05T14:07:09.123Z,"a,b",30\n2024-03-06T00:00:00.000Z,,',
        )


if __name__ == "__main__":
    unittest.main()
