import json
import logging

from fastapi.testclient import TestClient
from vto_normalizer.main import app
from vto_normalizer.rules import MAX_UPLOAD_BYTES

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_default_document():
    r = client.get("/document/default")
    assert r.status_code == 200

    data = r.json()
    assert data["companyName"] == ""
    assert data["rocks"] == []
    assert "company_name" not in data

def test_normalize_object():
    payload = {"companyName": 123, "coreValues": [1, None, "ok"], "rocks": [{"text": "a"}, "bad"]}
    r = client.post("/normalize", json=payload)
    assert r.status_code == 200

    data = r.json()
    doc = data["document"]
    assert doc["companyName"] == "123"
    assert doc["coreValues"] == ["1", "", "ok"]
    assert doc["rocks"] == [{"text": "a", "owner": ""}, {"text": "", "owner": ""}]
    assert data["report"]["summary"]["warnings"] == len(data["report"]["warnings"])
    assert data["report"]["summary"]["deterministic"] is True

def test_normalize_accepts_any_json_value():
    for payload in ([1, 2], "text", 7):
        r = client.post("/normalize", json=payload)
        assert r.status_code == 200
        assert r.json()["report"]["warnings"][0]["issue"] == "not_an_object"

    r = client.post("/normalize", content=b"null", headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert r.json()["document"]["coreValues"] == []

def test_import_json_file(caplog):
    caplog.set_level(logging.INFO, logger="vto_normalizer.main")
    # Latin-1 bytes force the encoding detection path
    raw = '{"companyName": "Montréal Millwork", "purpose": "Façades and café interiors", "extra": 1}'.encode("latin-1")

    files = {"file": ("vto.json", raw, "application/json")}
    r = client.post("/import", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["document"]["companyName"].startswith("Montr")
    assert "extra" not in data["document"]
    assert data["report"]["normalizations"]["encoding"]["decode_fallback"] is True
    assert data["report"]["warnings"][0]["issue"] == "unknown_field"
    # client-supplied filename is logged quoted
    assert "imported 'vto.json'" in caplog.text

def test_lone_surrogate_is_served():
    body = b'{"companyName": "Acme \\ud800"}'
    headers = {"Content-Type": "application/json"}

    r = client.post("/normalize", content=body, headers=headers)
    assert r.status_code == 200
    assert r.json()["document"]["companyName"] == "Acme \uFFFD"
    assert r.json()["report"]["warnings"][0]["issue"] == "invalid_text"

    r = client.post("/export", content=body, headers=headers)
    assert r.status_code == 200
    assert r.json()["filename"] == "Acme"

    r = client.post("/export/json", content=body, headers=headers)
    assert r.status_code == 200
    assert json.loads(r.content)["companyName"] == "Acme \uFFFD"

def test_json_endpoints_reject_oversized_body():
    body = b'"' + b"x" * MAX_UPLOAD_BYTES + b'"'
    headers = {"Content-Type": "application/json"}
    for path in ("/normalize", "/export", "/export/json"):
        r = client.post(path, content=body, headers=headers)
        assert r.status_code == 413

def test_import_rejects_non_json_filename():
    files = {"file": ("vto.csv", b"{}", "text/csv")}
    r = client.post("/import", files=files)
    assert r.status_code == 422

def test_import_rejects_invalid_json():
    files = {"file": ("vto.json", b"{broken", "application/json")}
    r = client.post("/import", files=files)
    assert r.status_code == 422
    assert r.json()["detail"].startswith("invalid JSON")

def test_import_rejects_oversized_upload():
    raw = b" " * (MAX_UPLOAD_BYTES + 1)
    files = {"file": ("vto.json", raw, "application/json")}
    r = client.post("/import", files=files)
    assert r.status_code == 413

def test_export_text():
    r = client.post("/export", json={"companyName": "Acme ®", "vtoDate": "2025-01-15"})
    assert r.status_code == 200

    data = r.json()
    assert data["companyName"] == "Acme (R)"
    assert data["vtoDate"] == "January 15, 2025"
    assert data["filename"] == "Acme"
    assert data["pdfFilename"] == "Acme-VTO.pdf"

def test_export_json_download():
    r = client.post("/export/json", json={"companyName": "My Company", "junk": True})
    assert r.status_code == 200
    assert r.headers["content-disposition"] == 'attachment; filename="My-Company-VTO.json"'

    data = json.loads(r.content)
    assert data["companyName"] == "My Company"
    assert "junk" not in data
