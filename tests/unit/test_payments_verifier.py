import pytest

from lawdesk.payments.models import MissingSessionIdError, PaymentVerificationError
from lawdesk.payments.verifier import parse_metadata, verify_payment_session

VERIFY_URL = "http://payments.test/api/payments/verify/cs_123"

METADATA = {
    "consultationId": "c1",
    "lawyerName": "Jane Doe",
    "datetime": "2025-01-01T10:00:00Z",
    "method": "video",
}

@pytest.mark.parametrize("session_id", [None, "", "   "])
def test_missing_session_id_makes_no_call(backend, session_id):
    with pytest.raises(MissingSessionIdError):
        verify_payment_session(session_id)
    assert backend.calls == []

def test_paid_session_returns_metadata(backend):
    backend.add("GET", VERIFY_URL, json={"success": True, "paid": True, "metadata": METADATA})

    verified = verify_payment_session("cs_123")

    assert verified.paid is True
    assert verified.metadata.consultation_id == "c1"
    assert len(backend.calls_to("GET", VERIFY_URL)) == 1

def test_success_false_raises_with_message(backend):
    backend.add("GET", VERIFY_URL, json={"success": False, "message": "Session expired"})
    with pytest.raises(PaymentVerificationError) as exc:
        verify_payment_session("cs_123")
    assert exc.value.message == "Session expired"

def test_success_false_without_message_uses_fallback(backend):
    backend.add("GET", VERIFY_URL, status=500, json={"success": False})
    with pytest.raises(PaymentVerificationError) as exc:
        verify_payment_session("cs_123")
    assert exc.value.message == "Failed to verify payment session"

def test_network_error_raises_verification_error(backend):
    backend.fail("GET", VERIFY_URL)
    with pytest.raises(PaymentVerificationError):
        verify_payment_session("cs_123")

def test_paid_must_be_strictly_true(backend):
    backend.add("GET", VERIFY_URL, json={"success": True, "paid": "yes", "metadata": METADATA})
    assert verify_payment_session("cs_123").paid is False

def test_verification_is_repeatable(backend):
    backend.add("GET", VERIFY_URL, json={"success": True, "paid": True, "metadata": METADATA})

    first = verify_payment_session("cs_123")
    second = verify_payment_session("cs_123")

    assert first.metadata == second.metadata
    assert len(backend.calls_to("GET", VERIFY_URL)) == 2

@pytest.mark.parametrize("raw", [None, {}, "x", {"consultationId": "c1"}])
def test_parse_metadata_incomplete_is_none(raw):
    assert parse_metadata(raw) is None
