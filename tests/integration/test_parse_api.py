"""
Integration tests for the parse endpoint.
"""
from unittest.mock import patch

from fastapi.testclient import TestClient

from filingparser.config import Settings


def word_payload(words):
    return [
        {
            "text": w.text,
            "bbox": w.bbox.to_dict(),
            "confidence": w.confidence,
            "line": w.line,
            "page": w.page,
        }
        for w in words
    ]


class TestParseEndpoint:
    """Tests for POST /api/v1/parse."""

    def test_text_only(self, client: TestClient):
        """Test a text-only request returns the serialized result."""
        response = client.post(
            "/api/v1/parse",
            json={"raw_text": "(in millions)\nTotal revenues  125,843"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["financials"]["revenues"]["total"]["value"] == 125_843_000_000
        assert data["tables_detected"] == []
        assert 0 <= data["extraction_confidence"] <= 100
        assert data["extraction_log"]

    def test_full_filing(self, client: TestClient, sample_filing_text: str):
        response = client.post("/api/v1/parse", json={"raw_text": sample_filing_text})

        assert response.status_code == 200
        data = response.json()
        assert data["metadata"]["company_name"] == "Apple Inc."
        assert data["extraction_confidence"] == 100
        assert data["validation_warnings"] == []

    def test_with_positioned_words(self, client: TestClient, balance_sheet_words):
        """Test positioned words enable table extraction."""
        response = client.post(
            "/api/v1/parse",
            json={"raw_text": "", "positioned_words": word_payload(balance_sheet_words)},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["tables_detected"]) == 1
        assert data["financials"]["liabilities"]["total"]["value"] == 45_200_000_000

    def test_legacy_projection(self, client: TestClient, sample_filing_text: str):
        response = client.post(
            "/api/v1/parse",
            json={"raw_text": sample_filing_text, "legacy": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["financials"]["revenues"]["total"] == 391_035_000_000
        assert data["financials"]["assets"]["goodwill"] is None
        assert data["tables_found"] == []
        assert data["errors"] == []

    def test_empty_request_rejected(self, client: TestClient):
        response = client.post("/api/v1/parse", json={"raw_text": "   "})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] is True
        assert data["error_code"] == "FP-100"

    def test_text_too_large(self, client: TestClient):
        """Test the configured text limit is enforced."""
        with patch(
            "filingparser.api.routes.parse.get_settings",
            return_value=Settings(max_text_chars=10),
        ):
            response = client.post("/api/v1/parse", json={"raw_text": "x" * 11})

        assert response.status_code == 413
        assert response.json()["error_code"] == "FP-101"

    def test_malformed_word_rejected(self, client: TestClient):
        """Test request validation rejects a word without a bounding box."""
        response = client.post(
            "/api/v1/parse",
            json={"raw_text": "text", "positioned_words": [{"text": "45,200"}]},
        )

        assert response.status_code == 422
