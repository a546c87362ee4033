import pytest

from lawdesk.payments.checkout_state import CheckoutState, CheckoutStore, CheckoutStoreRegistry

def test_initial_state_is_closed():
    state = CheckoutStore().state
    assert state == CheckoutState()
    assert state.is_modal_open is False
    assert state.submitting is False

def test_state_is_immutable():
    with pytest.raises(AttributeError):
        CheckoutState().amount = 10

def test_subscribers_receive_every_snapshot():
    store = CheckoutStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.open_session(client_secret="pi_1_secret_x", session_id="cs_1", amount=100, title="T")
    store.reset()
    unsubscribe()
    store.set(amount=5)

    assert [s.session_id for s in seen] == ["cs_1", ""]
    assert seen[0].is_modal_open is True

def test_failing_listener_does_not_break_writer():
    store = CheckoutStore()
    store.subscribe(lambda s: 1 / 0)
    store.set(title="ok")
    assert store.state.title == "ok"

def test_open_session_is_last_write_wins():
    store = CheckoutStore()
    store.open_session(client_secret="pi_a_secret_x", session_id="cs_a", amount=1, title="A")
    store.begin_submit()
    store.open_session(client_secret="pi_b_secret_x", session_id="cs_b", amount=2, title="B")

    assert store.state.session_id == "cs_b"
    assert store.state.submitting is False

def test_double_submit_is_guarded():
    store = CheckoutStore()
    assert store.begin_submit() is True
    assert store.begin_submit() is False
    store.end_submit()
    assert store.begin_submit() is True

def test_unknown_field_rejected():
    with pytest.raises(TypeError):
        CheckoutStore().set(colour="red")

def test_registry_one_store_per_key():
    registry = CheckoutStoreRegistry()
    assert registry.get("u1") is registry.get("u1")
    assert registry.get("u1") is not registry.get("u2")
    registry.discard("u1")
    assert registry.peek("u1") is None
