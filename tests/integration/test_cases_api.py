import json

import pytest

CASES = "http://backend.test/api/freelancers/cases"

@pytest.fixture
def lawyer(as_user):
    return as_user(id="l1", role="freelancer")

def test_cases_reserved_to_freelancers(client, backend):
    r = client.get("/api/v1/freelancer/cases")
    assert r.status_code == 403
    assert r.json()["detail"] == "Freelancer access required"
    assert backend.calls == []

def test_list_assigned_cases(client, backend, lawyer):
    backend.add("GET", f"{CASES}/l1", json=[{"id": 7, "status": "pending"}])

    r = client.get("/api/v1/freelancer/cases")

    assert r.status_code == 200
    assert r.json() == [{"id": 7, "status": "pending"}]

@pytest.mark.parametrize("action", ["accept", "decline", "complete"])
def test_case_actions(client, backend, lawyer, action):
    backend.add("POST", f"{CASES}/7/{action}", json={"success": True})

    r = client.post(f"/api/v1/freelancer/cases/7/{action}")

    assert r.status_code == 200
    assert json.loads(backend.calls[0].content) == {"freelancerId": "l1"}

def test_unknown_case_action(client, backend, lawyer):
    r = client.post("/api/v1/freelancer/cases/7/archive")
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid action"
    assert backend.calls == []

def test_annotate_case(client, backend, lawyer):
    backend.add("POST", f"{CASES}/7/annotate", status=201, json={"success": True})

    r = client.post("/api/v1/freelancer/cases/7/annotate", json={
        "annotatedDocumentUrl": "https://files.example.com/annotated.pdf",
        "notes": "See clause 4",
    })

    assert r.status_code == 201
    assert json.loads(backend.calls[0].content) == {
        "annotatedDocumentUrl": "https://files.example.com/annotated.pdf",
        "freelancerId": "l1",
        "notes": "See clause 4",
    }

def test_annotate_requires_document_url(client, backend, lawyer):
    assert client.post("/api/v1/freelancer/cases/7/annotate", json={"notes": "x"}).status_code == 422

def test_case_service_unreachable(client, backend, lawyer):
    backend.fail("POST", f"{CASES}/7/accept")
    r = client.post("/api/v1/freelancer/cases/7/accept")
    assert r.status_code == 502
    assert r.json()["detail"] == "Case service unavailable"
