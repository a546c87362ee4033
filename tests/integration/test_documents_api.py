import json
from datetime import datetime, timezone

DOWNLOAD_URL = "http://backend.test/api/v1/documents/d1/download"
GENERATE_URL = "http://backend.test/api/v1/documents/generate"

DOCUMENT = {
    "content": "# Rental Agreement\n\nThe tenant shall pay rent monthly.",
    "createdAt": "2025-03-04T10:00:00Z",
    "downloadCount": 3,
}

def test_list_user_documents(client, mongo):
    mongo.seed("documents", [
        {"_id": "a", "userId": "test-user", "title": "Old", "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc)},
        {"_id": "b", "userId": "test-user", "title": "New", "createdAt": datetime(2025, 2, 1, tzinfo=timezone.utc)},
        {"_id": "c", "userId": "other", "title": "Hidden", "createdAt": datetime(2025, 3, 1, tzinfo=timezone.utc)},
    ])

    r = client.get("/api/v1/documents/user", params={"userId": "test-user"})

    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert [d["id"] for d in data["documents"]] == ["b", "a"]

def test_list_user_documents_validation(client, mongo):
    assert client.get("/api/v1/documents/user").json()["detail"] == "Missing userId"
    assert client.get("/api/v1/documents/user", params={"userId": "other"}).status_code == 403

def test_generate_forces_caller_id(client, backend):
    backend.add("POST", GENERATE_URL, status=201, json={"success": True, "document": {"id": "d1"}})

    r = client.post("/api/v1/documents/generate", json={"type": "lease", "userId": "spoofed"})

    assert r.status_code == 201
    sent = json.loads(backend.calls[0].content)
    assert sent == {"type": "lease", "userId": "test-user"}

def test_get_document_passthrough(client, backend):
    backend.add("GET", "http://backend.test/api/v1/documents/d1", status=404, json={"message": "Document not found"})

    r = client.get("/api/v1/documents/d1", params={"userId": "test-user"})

    assert r.status_code == 404
    assert r.json() == {"message": "Document not found"}
    assert backend.calls[0].url.params["userId"] == "test-user"

def test_export_txt(client, backend):
    backend.add("GET", DOWNLOAD_URL, json={"document": DOCUMENT})

    r = client.get("/api/v1/documents/d1/export", params={"userId": "test-user", "format": "txt"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.headers["content-disposition"] == 'attachment; filename="Rental-Agreement-2025-03-04.txt"'
    assert r.headers["x-download-count"] == "3"
    assert r.text == "Rental Agreement\n\nThe tenant shall pay rent monthly."
    assert backend.calls[0].url.params["format"] == "txt"

def test_export_pdf(client, backend):
    backend.add("GET", DOWNLOAD_URL, json={"document": DOCUMENT})

    r = client.get("/api/v1/documents/d1/export", params={"userId": "test-user", "format": "pdf"})

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")

def test_export_unpaid_document_is_403(client, backend):
    backend.add("GET", DOWNLOAD_URL, status=403, json={"message": "Payment required"})

    r = client.get("/api/v1/documents/d1/export", params={"userId": "test-user", "format": "docx"})

    assert r.status_code == 403
    assert r.json()["detail"] == "Payment required"

def test_export_upstream_failure_is_502(client, backend):
    backend.add("GET", DOWNLOAD_URL, status=500, json={})
    r = client.get("/api/v1/documents/d1/export", params={"userId": "test-user", "format": "pdf"})
    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to download document"

def test_export_unsupported_format(client, backend):
    r = client.get("/api/v1/documents/d1/export", params={"userId": "test-user", "format": "odt"})
    assert r.status_code == 400
    assert backend.calls == []

def test_create_payment_forces_caller_id(client, backend):
    backend.add("POST", "http://backend.test/api/v1/documents/d1/create-payment", json={"url": "https://checkout.stripe.com/c/cs_doc"})

    r = client.post("/api/v1/documents/d1/create-payment", json={"userId": "spoofed"})

    assert r.status_code == 200
    assert r.json()["url"].endswith("cs_doc")
    assert json.loads(backend.calls[0].content) == {"userId": "test-user"}

def test_verify_payment(client, backend):
    backend.add("POST", "http://backend.test/api/v1/documents/d1/verify-payment", json={"success": True, "paid": True})

    r = client.post("/api/v1/documents/d1/verify-payment", json={"sessionId": "cs_doc"})

    assert r.json() == {"success": True, "paid": True}
    assert json.loads(backend.calls[0].content) == {"userId": "test-user", "sessionId": "cs_doc"}

def test_verify_payment_requires_session(client, backend):
    assert client.post("/api/v1/documents/d1/verify-payment", json={"sessionId": " "}).status_code == 400
    assert client.post("/api/v1/documents/d1/verify-payment", json={}).status_code == 422
    assert backend.calls == []
