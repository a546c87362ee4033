"""Parcours complet: checkout (modal) -> confirmation Stripe -> page succès."""

CREATE_URL = "http://payments.test/api/payments/create-checkout-session"
VERIFY_URL = "http://payments.test/api/payments/verify/cs_flow"

def test_consultation_purchase_flow(client, backend, monkeypatch):
    backend.add("POST", CREATE_URL, json={"sessionId": "cs_flow", "clientSecret": "pi_flow_secret_123456"})
    backend.add("GET", VERIFY_URL, json={
        "success": True,
        "paid": True,
        "metadata": {"consultationId": "c9", "lawyerName": "Ada Counsel", "datetime": "2025-05-20T14:30:00Z", "method": "audio"},
    })
    confirmed = {}

    def fake_confirm(*, client_secret, payment_method, return_url):
        confirmed.update(client_secret=client_secret, return_url=return_url)
        return {"id": "pi_flow", "status": "succeeded"}
    monkeypatch.setattr("lawdesk.payments.stripe_client.confirm_payment_intent", fake_confirm)

    # 1) Création de la session, le modal s'ouvre
    r = client.post("/api/v1/payments/checkout", json={
        "consultationId": "c9",
        "lawyerName": "Ada Counsel",
        "datetime": "2025-05-20T14:30:00Z",
        "method": "audio",
        "fee": 7500,
        "userId": "test-user",
    })
    assert r.status_code == 200
    state = client.get("/api/v1/payments/checkout/state").json()
    assert state["isModalOpen"] is True
    assert state["amount"] == 7500

    # 2) Paiement confirmé, le modal se ferme
    r = client.post("/api/v1/payments/checkout/confirm", json={"paymentMethod": "pm_card_visa"})
    assert r.status_code == 200
    redirect_url = r.json()["redirectUrl"]
    assert confirmed["client_secret"] == "pi_flow_secret_123456"
    assert confirmed["return_url"] == redirect_url
    assert client.get("/api/v1/payments/checkout/state").json()["isModalOpen"] is False

    # 3) Retour sur la page succès
    page = client.get(redirect_url)
    assert page.status_code == 200
    assert "Payment Successful" in page.text
    assert "Ada Counsel" in page.text
    assert "Tuesday, May 20, 2025 at 14:30" in page.text
    assert len(backend.calls_to("GET", VERIFY_URL)) == 1

def test_returning_without_session_lands_on_consultations(client, backend):
    r = client.get("/dashboard/payment-success", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/dashboard/consultations"
