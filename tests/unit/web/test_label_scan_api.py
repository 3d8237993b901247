#!/usr/bin/env python3
"""
Unit tests for the label scan endpoint.
Tests the POST /api/chemical/scan endpoint.
"""

import unittest
from unittest.mock import MagicMock

from core.exceptions import ConfigurationError, ExternalServiceError
from core.scan.service import LabelScanService
from core.sds.models import ResolutionResult, ResolutionSource, SafetyDocumentRecord

IMAGE = "data:image/png;base64,aGVsbG8="


class TestLabelScanEndpoint(unittest.TestCase):
    """Unit tests for label scan endpoint."""

    def setUp(self):
        from fastapi.testclient import TestClient
        from web.backend.app import app
        from web.backend.dependencies import get_scan_service
        from web.backend.rate_limit import limiter

        # Disable rate limiting for tests
        limiter.enabled = False

        self.extractor = MagicMock()
        self.extractor.extract_label.return_value = {
            "product_name": "Acetone",
            "manufacturer": "Sunnyside",
            "signal_word": "DANGER",
            "pictogram_codes": ["GHS02", "GHS07"],
            "hazard_statements": [{"code": "H225", "text": "Highly flammable liquid and vapor"}],
            "confidence": 0.9,
            "fields_uncertain": [],
        }
        self.resolver = MagicMock()
        service = LabelScanService(self.extractor, self.resolver)

        self.app = app
        self.app.dependency_overrides[get_scan_service] = lambda: service
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()

    def _post(self, body):
        return self.client.post("/api/chemical/scan", json=body)

    def _lookup(self, source, confidence=0.9):
        record = SafetyDocumentRecord(
            product_name="Acetone",
            manufacturer="Sunnyside",
            sds_url="https://example.com/acetone.pdf",
            sds_source="Manufacturer website",
            manufacturer_portal_url="https://example.com/sds",
            confidence=confidence,
        )
        return ResolutionResult(record, source)

    def test_scan_with_auto_linked_sds(self):
        self.resolver.resolve.return_value = self._lookup(ResolutionSource.EXTERNAL)

        response = self._post({"image": IMAGE, "mimeType": "image/png"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["product_name"], "Acetone")
        self.assertEqual(data["signal_word"], "DANGER")
        self.assertEqual(data["pictogram_codes"], ["GHS02", "GHS07"])
        self.assertEqual(data["hazard_statements"][0]["code"], "H225")
        self.assertEqual(data["confidence"], 0.9)
        self.assertEqual(data["sds_status"], "current")
        self.assertEqual(data["sds_url"], "https://example.com/acetone.pdf")
        self.assertFalse(data["sds_uploaded"])
        self.assertEqual(data["manufacturer_sds_portal"], "https://example.com/sds")
        self.assertEqual(data["sds_lookup_result"]["sds_source"], "Manufacturer website")
        self.extractor.extract_label.assert_called_once_with("aGVsbG8=", "image/png")

    def test_cache_hit_uses_cached_source_label(self):
        self.resolver.resolve.return_value = self._lookup(ResolutionSource.CACHE, confidence=0.6)

        data = self._post({"image": IMAGE, "mimeType": "image/png"}).json()

        self.assertEqual(data["sds_status"], "current")
        self.assertEqual(data["sds_lookup_result"]["notes"], "Found in shared SDS database (cached)")

    def test_low_confidence_lookup_is_not_linked(self):
        self.resolver.resolve.return_value = self._lookup(ResolutionSource.EXTERNAL, confidence=0.6)

        data = self._post({"image": IMAGE, "mimeType": "image/png"}).json()

        self.assertEqual(data["sds_status"], "missing")
        self.assertIsNone(data["sds_url"])
        self.assertEqual(data["manufacturer_sds_portal"], "https://example.com/sds")

    def test_failed_lookup_still_returns_label(self):
        self.resolver.resolve.side_effect = ExternalServiceError("AI service error (503)", status_code=503)

        response = self._post({"image": IMAGE, "mimeType": "image/png"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["product_name"], "Acetone")
        self.assertIsNone(data["sds_lookup_result"])
        self.assertIsNone(data["sds_status"])

    def test_missing_image_returns_400(self):
        response = self._post({"mimeType": "image/png"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {
            "success": False,
            "error": "Missing image or mimeType in request body",
            "type": "ValidationError",
        })
        self.extractor.extract_label.assert_not_called()

    def test_missing_credentials_return_500(self):
        self.extractor.extract_label.side_effect = ConfigurationError("SDS lookup API key not configured")

        response = self._post({"image": IMAGE, "mimeType": "image/png"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["type"], "ConfigurationError")


if __name__ == '__main__':
    unittest.main()
