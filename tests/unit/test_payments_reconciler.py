from lawdesk.payments import reconciler
from lawdesk.payments.models import ConsultationDetails, PaymentMetadata, VerifiedPayment

METADATA = PaymentMetadata.model_validate({
    "consultationId": "c1",
    "lawyerName": "Jane Doe",
    "datetime": "2025-01-01T10:00:00Z",
    "method": "video",
})

def test_maps_metadata_to_details():
    details = reconciler.to_consultation_details(METADATA)
    assert details.model_dump(by_alias=True) == {
        "id": "c1",
        "lawyerName": "Jane Doe",
        "datetime": "2025-01-01T10:00:00Z",
        "method": "video",
    }

def test_reconcile_paid_session():
    details = reconciler.reconcile(VerifiedPayment(paid=True, metadata=METADATA))
    assert isinstance(details, ConsultationDetails)
    assert details.id == "c1"

def test_reconcile_unpaid_is_none():
    assert reconciler.reconcile(VerifiedPayment(paid=False, metadata=METADATA)) is None

def test_reconcile_without_metadata_is_none():
    assert reconciler.reconcile(VerifiedPayment(paid=True, metadata=None)) is None
    assert reconciler.reconcile(None) is None

def test_calendar_event_defaults_to_one_hour():
    event = reconciler.calendar_event(reconciler.to_consultation_details(METADATA))
    assert event == {
        "name": "Legal consultation with Jane Doe",
        "description": "Video consultation",
        "startDate": "2025-01-01",
        "startTime": "10:00",
        "endDate": "2025-01-01",
        "endTime": "11:00",
        "location": "Online",
    }

def test_calendar_event_ending_after_midnight():
    late = METADATA.model_copy(update={"datetime": "2025-01-01T23:30:00Z"})
    event = reconciler.calendar_event(reconciler.to_consultation_details(late))
    assert (event["startDate"], event["startTime"]) == ("2025-01-01", "23:30")
    assert (event["endDate"], event["endTime"]) == ("2025-01-02", "00:30")

def test_calendar_event_with_unparsable_date():
    details = ConsultationDetails(id="c1", lawyer_name="X", datetime="tomorrow", method="chat")
    assert reconciler.calendar_event(details) is None
    assert reconciler.format_datetime("tomorrow") == "tomorrow"

def test_format_datetime_readable():
    assert reconciler.format_datetime("2025-01-01T10:00:00Z") == "Wednesday, January 01, 2025 at 10:00"
