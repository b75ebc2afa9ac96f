import json
import os
import unittest
from unittest.mock import patch

# Keep API tests deterministic: without a key the AI path degrades to the regex fallback.
os.environ["GROK_API_KEY"] = ""
os.environ["AI_PROVIDER"] = "grok"

from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app, run
from resume_fixtures import make_docx, make_pdf

RESUME_TEXT = "Jane Doe\njane.doe@example.com\n+1 555-123-4567\nPython, SQL, Docker\n"


class FakeClient:
    async def complete(self, messages):
        prompt = messages[0].content
        if "vile and honest resume reviewer" in prompt:
            return json.dumps(
                {
                    "Experience": [{"Role Title": "Engineer", "Company": "Acme", "Description": "Googled a lot."}],
                    "ProjectsAndAwards": [{"Role Title": "Hackathon", "Company": "", "Description": "Free pizza."}],
                }
            )
        return json.dumps({"name": "Jane Doe", "email": "jane.doe@example.com", "skills": ["Python"]})


class ParseResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_txt_upload_without_key_uses_fallback(self):
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        data = body["data"]
        self.assertEqual(data["name"], "Jane Doe")
        self.assertEqual(data["email"], "jane.doe@example.com")
        self.assertEqual(data["phone"], "+1 555-123-4567")
        self.assertEqual(data["summary"], "Unable to parse with AI - please check manually")
        self.assertEqual(data["rawText"], RESUME_TEXT)
        self.assertEqual(data["honestReview"], {"Experience": [], "ProjectsAndAwards": []})

    def test_docx_upload_with_ai(self):
        content = make_docx(["Jane Doe", "Engineer at Acme"])
        with patch("app.services.resume_service.get_ai_client", return_value=FakeClient()):
            response = self.client.post(
                "/v1/parse-resume",
                files={"file": ("resume.docx", content, "application/octet-stream")},
            )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["source"], "ai")
        self.assertEqual(data["skills"], ["Python"])
        self.assertEqual(data["experience"], [])
        self.assertEqual(data["rawText"], "Jane Doe\nEngineer at Acme")
        self.assertEqual(data["honestReview"]["ProjectsAndAwards"][0]["Description"], "Free pizza.")

    def test_pdf_upload(self):
        content = make_pdf(["Jane Doe", "jane.doe@example.com"])
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.pdf", content, "application/pdf")},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], "jane.doe@example.com")

    def test_missing_file_is_rejected(self):
        response = self.client.post("/v1/parse-resume", data={"other": "value"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "No file uploaded")

    def test_unsupported_format_is_rejected(self):
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Unsupported file format")

    def test_empty_file_is_rejected(self):
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.txt", b"", "text/plain")},
        )
        self.assertEqual(response.status_code, 400)

    def test_mismatched_signature_is_rejected(self):
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.pdf", b"just some text", "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn(".pdf", response.json()["detail"])

    def test_oversized_upload_returns_413(self):
        oversized = b"a" * (settings.max_upload_bytes + 1)
        response = self.client.post(
            "/v1/parse-resume",
            files={"file": ("resume.txt", oversized, "text/plain")},
        )
        self.assertEqual(response.status_code, 413)

    def test_unexpected_failure_returns_500(self):
        with patch("app.api.v1.resume.analyze_resume", side_effect=RuntimeError("boom")):
            response = self.client.post(
                "/v1/parse-resume",
                files={"file": ("resume.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
            )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to parse resume")


class ExportApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_export_uses_candidate_name(self):
        payload = {"name": "Jane Doe", "skills": ["Python"]}
        response = self.client.post("/v1/export", json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.headers["content-disposition"],
            "attachment; filename=\"resume-analysis-Jane Doe.json\"; "
            "filename*=UTF-8''resume-analysis-Jane%20Doe.json",
        )
        self.assertEqual(response.text, json.dumps(payload, indent=2))

    def test_export_defaults_to_candidate(self):
        response = self.client.post("/v1/export", json={"name": None})
        self.assertIn("resume-analysis-candidate.json", response.headers["content-disposition"])

    def test_export_strips_path_characters(self):
        response = self.client.post("/v1/export", json={"name": "../../etc/passwd"})
        self.assertIn('filename="resume-analysis-etcpasswd.json"', response.headers["content-disposition"])

    def test_export_keeps_non_ascii_names(self):
        response = self.client.post("/v1/export", json={"name": "Zoë Müller"})
        disposition = response.headers["content-disposition"]
        self.assertIn('filename="resume-analysis-Zoe Muller.json"', disposition)
        self.assertIn("filename*=UTF-8''resume-analysis-Zo%C3%AB%20M%C3%BCller.json", disposition)


class RunTests(unittest.TestCase):
    def test_run_serves_the_app_with_uvicorn(self):
        with patch("uvicorn.run") as mocked:
            run()
        mocked.assert_called_once_with(
            "app.main:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    unittest.main()
