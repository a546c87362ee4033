HISTORY = "http://backend.test/api/payment-history"

def test_list_with_filters(client, backend):
    backend.add("GET", HISTORY, json={"payments": [{"id": "p1"}], "pagination": {"page": 2, "pages": 3}})

    r = client.get("/api/v1/payment-history", params={
        "userId": "test-user",
        "page": 2,
        "status": "completed",
        "serviceType": "all",
        "startDate": "2025-01-01",
    })

    assert r.status_code == 200
    assert r.json()["pagination"]["page"] == 2
    params = backend.calls[0].url.params
    assert params["userId"] == "test-user"
    assert params["page"] == "2"
    assert params["limit"] == "10"
    assert params["status"] == "completed"
    assert params["startDate"] == "2025-01-01"
    assert "serviceType" not in params
    assert "endDate" not in params

def test_list_of_someone_else(client, backend):
    assert client.get("/api/v1/payment-history", params={"userId": "other"}).status_code == 403
    assert client.get("/api/v1/payment-history").status_code == 400
    assert backend.calls == []

def test_list_rejects_bad_page(client, backend):
    assert client.get("/api/v1/payment-history", params={"userId": "test-user", "page": 0}).status_code == 422

def test_stats(client, backend):
    backend.add("GET", f"{HISTORY}/stats", json={"totalSpent": 12000, "totalPayments": 3})

    r = client.get("/api/v1/payment-history/stats", params={"userId": "test-user"})

    assert r.json() == {"totalSpent": 12000, "totalPayments": 3}
    assert backend.calls[0].url.params["userId"] == "test-user"

def test_history_unreachable(client, backend):
    backend.fail("GET", f"{HISTORY}/stats")
    r = client.get("/api/v1/payment-history/stats", params={"userId": "test-user"})
    assert r.status_code == 502
    assert r.json()["detail"] == "Payment history service unavailable"
