"""
API tests for the Smart Paste routes.
"""

from unittest.mock import patch
import json

from exceptions import PageFetchError
from services.page_fetch_service import FetchedPage

BASE = "/api/smart-paste"
TEXT = "Sensor Type: Full-frame CMOS\nLens Mount: Canon RF"


def _parse(client, text: str = TEXT, **extra) -> dict:
    response = client.post(f"{BASE}/parse", json={"text": text, **extra})
    assert response.status_code == 200
    return response.json()


# ===================
# PARSE TESTS
# ===================

class TestParseEndpoints:
    """Tests for the parse endpoints."""

    def test_parse_text(self, client):
        body = _parse(client, confidence_mode="strict")

        assert body["preview_id"]
        assert body["threshold"] == 85
        assert body["matched_count"] == 2
        assert set(body["visible_fields"]) == {"Sensor Type", "Lens Mount"}
        assert body["result"]["fields"]["Lens Mount"]["value"] == "Canon RF"

    def test_parse_with_catalog(self, client):
        catalog = {"Audio": [{"name": "Polar Pattern", "required": True}]}
        body = _parse(client, "Polar Pattern: Cardioid\nWeight: 88 g", catalog=catalog)

        assert list(body["result"]["fields"].keys()) == ["Polar Pattern"]
        assert body["unmatched_count"] == 1

    def test_empty_input(self, client):
        response = client.post(f"{BASE}/parse", json={"text": "   "})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "EMPTY_INPUT"

    def test_parse_adds_history(self, client):
        _parse(client)
        body = client.get(f"{BASE}/history").json()
        assert body["total"] == 1
        assert body["data"][0]["full_text"] == TEXT

    def test_parse_file(self, client):
        response = client.post(
            f"{BASE}/parse-file",
            files={"file": ("specs.txt", TEXT.encode("utf-8"), "text/plain")},
            data={"confidence_mode": "balanced"}
        )
        assert response.status_code == 200
        assert response.json()["result"]["fields"]["Sensor Type"]["value"] == "Full-frame CMOS"

    def test_parse_file_with_catalog(self, client):
        response = client.post(
            f"{BASE}/parse-file",
            files={"file": ("specs.txt", b"Polar Pattern: Cardioid", "text/plain")},
            data={"catalog": json.dumps({"Audio": ["Polar Pattern"]})}
        )
        assert response.status_code == 200
        assert "Polar Pattern" in response.json()["result"]["fields"]

    def test_parse_file_invalid_catalog(self, client):
        response = client.post(
            f"{BASE}/parse-file",
            files={"file": ("specs.txt", b"Polar Pattern: Cardioid", "text/plain")},
            data={"catalog": "not json"}
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_CATALOG"

    def test_parse_file_image_rejected(self, client):
        response = client.post(
            f"{BASE}/parse-file",
            files={"file": ("photo.jpg", b"\xff\xd8\xff", "image/jpeg")}
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNSUPPORTED_FILE_TYPE"

    @patch("services.smart_paste_service.fetch_product_page")
    def test_parse_url(self, mock_fetch, client):
        url = "https://shop.example.com/canon-r5"
        mock_fetch.return_value = FetchedPage(text=TEXT, html="", source_url=url)

        response = client.post(f"{BASE}/parse-url", json={"url": url})

        assert response.status_code == 200
        assert response.json()["matched_count"] == 2
        mock_fetch.assert_called_once_with(url)

    @patch("services.smart_paste_service.fetch_product_page")
    def test_parse_url_fetch_failure(self, mock_fetch, client):
        mock_fetch.side_effect = PageFetchError("https://x.test", "Proxy fetch failed: timeout")

        response = client.post(f"{BASE}/parse-url", json={"url": "https://x.test"})
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "PAGE_FETCH_ERROR"

    def test_batch(self, client):
        text = (
            "Name: First Camera\nSensor Type: Full-frame CMOS\n---\n"
            "Name: Second Camera\nSensor Type: APS-C CMOS"
        )
        response = client.post(f"{BASE}/batch", json={"text": text})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [i["segment"]["name"] for i in body["data"]] == ["First Camera", "Second Camera"]
        assert body["data"][0]["preview_id"] != body["data"][1]["preview_id"]

    def test_batch_empty(self, client):
        response = client.post(f"{BASE}/batch", json={"text": ""})
        assert response.status_code == 422


# ===================
# PREVIEW TESTS
# ===================

class TestPreviewEndpoints:
    """Tests for preview get, diff, apply and discard."""

    def test_get_preview(self, client):
        preview_id = _parse(client)["preview_id"]
        response = client.get(f"{BASE}/previews/{preview_id}")
        assert response.status_code == 200
        assert "Sensor Type" in response.json()["fields"]

    def test_unknown_preview(self, client):
        response = client.get(f"{BASE}/previews/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PREVIEW_NOT_FOUND"

    def test_diff(self, client):
        preview_id = _parse(client)["preview_id"]
        response = client.post(
            f"{BASE}/previews/{preview_id}/diff",
            json={"existing_specs": {"Sensor Type": "APS-C CMOS", "Weight": "500 g"}}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["counts"] == {"unchanged": 0, "changed": 1, "added": 1, "removed": 1}
        assert [e["spec_name"] for e in body["data"]] == ["Sensor Type", "Weight", "Lens Mount"]

    def test_apply(self, client):
        """Apply builds the payload, learns aliases and drops the preview."""
        preview_id = _parse(client)["preview_id"]
        response = client.post(
            f"{BASE}/previews/{preview_id}/apply",
            json={
                "overrides": {"Lens Mount": "Canon RF (full-frame)"},
                "top_level": {"name": "Canon EOS R5"},
                "confirmed_aliases": {"Sensor": "Sensor Type"},
            }
        )

        assert response.status_code == 200
        body = response.json()
        assert body["specs"] == {"Sensor Type": "Full-frame CMOS", "Lens Mount": "Canon RF (full-frame)"}
        assert body["name"] == "Canon EOS R5"

        assert client.get(f"{BASE}/previews/{preview_id}").status_code == 404
        aliases = client.get(f"{BASE}/aliases").json()
        assert [a["source_key"] for a in aliases["data"]] == ["sensor"]

    def test_apply_unknown_alias_field(self, client):
        """An alias naming no catalog field fails the apply and keeps the preview."""
        preview_id = _parse(client)["preview_id"]
        response = client.post(
            f"{BASE}/previews/{preview_id}/apply",
            json={"confirmed_aliases": {"Sensor": "Sensor Type", "Mfr": "Brand"}}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNKNOWN_SPEC_FIELD"
        assert client.get(f"{BASE}/previews/{preview_id}").status_code == 200
        assert client.get(f"{BASE}/aliases").json()["total"] == 0

    def test_apply_unknown_preview(self, client):
        response = client.post(f"{BASE}/previews/missing/apply", json={})
        assert response.status_code == 404

    def test_discard(self, client):
        preview_id = _parse(client)["preview_id"]
        assert client.delete(f"{BASE}/previews/{preview_id}").json() == {
            "preview_id": preview_id, "deleted": True
        }
        assert client.delete(f"{BASE}/previews/{preview_id}").json()["deleted"] is False


# ===================
# ALIAS TESTS
# ===================

class TestAliasEndpoints:
    """Tests for alias endpoints."""

    def test_create_and_list(self, client):
        response = client.post(f"{BASE}/aliases", json={"source_key": "Wt.", "spec_name": "Weight"})
        assert response.status_code == 201
        assert response.json()["source_key"] == "wt"

        body = client.get(f"{BASE}/aliases").json()
        assert body["total"] == 1
        assert body["data"][0]["spec_name"] == "Weight"

    def test_create_unknown_field(self, client):
        """Aliases must name a catalog field."""
        response = client.post(f"{BASE}/aliases", json={"source_key": "Mfr", "spec_name": "Brand"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNKNOWN_SPEC_FIELD"
        assert client.get(f"{BASE}/aliases").json()["total"] == 0

    def test_create_with_catalog(self, client):
        response = client.post(
            f"{BASE}/aliases",
            json={"source_key": "Mfr", "spec_name": "Brand", "catalog": {"General": [{"name": "Brand"}]}}
        )
        assert response.status_code == 201
        assert response.json()["spec_name"] == "Brand"

    def test_alias_used_by_next_parse(self, client):
        client.post(f"{BASE}/aliases", json={"source_key": "Mount", "spec_name": "Lens Mount"})
        body = _parse(client, "Mount: Sony E")
        field_match = body["result"]["fields"]["Lens Mount"]
        assert (field_match["confidence"], field_match["tier"]) == (95, "alias")

    def test_forget(self, client):
        client.post(f"{BASE}/aliases", json={"source_key": "Mount", "spec_name": "Lens Mount"})
        assert client.delete(f"{BASE}/aliases/Mount").status_code == 200

        response = client.delete(f"{BASE}/aliases/Mount")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ALIAS_NOT_FOUND"

    def test_clear(self, client):
        client.post(f"{BASE}/aliases", json={"source_key": "Mount", "spec_name": "Lens Mount"})
        client.post(f"{BASE}/aliases", json={"source_key": "Wt", "spec_name": "Weight"})
        assert client.delete(f"{BASE}/aliases").json() == {"removed": 2}


# ===================
# APP TESTS
# ===================

class TestAppEndpoints:
    def test_catalog(self, client):
        body = client.get(f"{BASE}/catalog").json()
        assert "Cameras" in body
        assert {"name": "Lens Mount", "required": True} in body["Lenses"]

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["page_fetch"] in ("configured", "not_configured")

    def test_root(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["parse"] == "/api/smart-paste/parse"
