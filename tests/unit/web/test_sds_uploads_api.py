#!/usr/bin/env python3
"""
Unit tests for the SDS upload endpoints.
Tests POST and GET /api/sds/uploads against a temporary upload directory.
"""

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.config_loader import UploadConfig
from core.uploads.service import SdsUploadService
from database.database import build_engine, build_session_factory
from database.models import Base

PDF_BYTES = b"%PDF-1.4\n% test document\n"


class TestSdsUploadEndpoints(unittest.TestCase):
    """Unit tests for SDS upload endpoints."""

    def setUp(self):
        from fastapi.testclient import TestClient
        from web.backend.app import app
        from web.backend.dependencies import get_upload_service
        from web.backend.rate_limit import limiter

        # Disable rate limiting for tests
        limiter.enabled = False

        self.upload_dir = Path(tempfile.mkdtemp())
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.service = SdsUploadService(
            build_session_factory(self.engine),
            UploadConfig(directory=str(self.upload_dir))
        )

        self.app = app
        self.app.dependency_overrides[get_upload_service] = lambda: self.service
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()
        self.engine.dispose()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def _upload(self, data, filename="acetone-sds.pdf", content=PDF_BYTES, content_type="application/pdf"):
        return self.client.post(
            "/api/sds/uploads",
            files={"file": (filename, content, content_type)},
            data=data,
        )

    def test_upload_success(self):
        response = self._upload({"sdsId": "chem-1", "uploadedBy": "Pat"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        record = data["record"]
        self.assertEqual(record["sdsId"], "chem-1")
        self.assertEqual(record["originalName"], "acetone-sds.pdf")
        self.assertEqual(record["uploadedBy"], "Pat")
        self.assertEqual(record["fileSize"], len(PDF_BYTES))
        self.assertRegex(record["fileName"], r"^sds-chem-1-\d+\.pdf$")
        self.assertEqual(data["url"], f"/sds-uploads/{record['fileName']}")
        self.assertTrue((self.upload_dir / record["fileName"]).exists())

    def test_uploader_defaults_to_unknown(self):
        response = self._upload({"sdsId": "chem-1"})

        self.assertEqual(response.json()["record"]["uploadedBy"], "Unknown")

    def test_non_pdf_rejected(self):
        response = self._upload({"sdsId": "chem-1"}, filename="notes.txt", content=b"hello",
                                content_type="text/plain")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {
            "success": False,
            "error": "Only PDF files are accepted",
            "type": "UploadValidationError",
        })

    def test_missing_sds_id_rejected(self):
        response = self._upload({})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Missing required fields: file and sdsId")

    def test_missing_file_rejected(self):
        response = self.client.post("/api/sds/uploads", data={"sdsId": "chem-1"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Missing required fields: file and sdsId")

    def test_path_traversal_sds_id_rejected(self):
        response = self._upload({"sdsId": "../../etc"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(list(self.upload_dir.iterdir()), [])

    def test_oversized_file_rejected_before_save(self):
        self.service.config.max_size_bytes = 16

        with patch.object(self.service, "save", wraps=self.service.save) as save:
            response = self._upload({"sdsId": "chem-1"}, content=PDF_BYTES + b"x" * 64)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["type"], "UploadValidationError")
        self.assertIn("File size must be under", response.json()["error"])
        save.assert_not_called()
        self.assertEqual(list(self.upload_dir.iterdir()), [])

    def test_list_uploads(self):
        self._upload({"sdsId": "chem-1"}, filename="first.pdf")
        self._upload({"sdsId": "chem-1"}, filename="second.pdf")
        self._upload({"sdsId": "chem-2"})

        response = self.client.get("/api/sds/uploads")

        self.assertEqual(response.status_code, 200)
        uploads = response.json()["uploads"]
        self.assertEqual([u["sdsId"] for u in uploads], ["chem-1", "chem-2"])
        self.assertEqual(uploads[0]["originalName"], "second.pdf")


if __name__ == '__main__':
    unittest.main()
