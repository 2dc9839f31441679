import logging

import pytest

from storefront.payments.webhooks import (
    CHECKOUT_SESSION_COMPLETED,
    PAYMENT_INTENT_SUCCEEDED,
    ProcessedEvents,
    WebhookDispatcher,
    build_dispatcher,
)


def _event(event_type, event_id="evt_1", obj=None):
    return {"id": event_id, "type": event_type, "data": {"object": obj or {"id": "cs_test_123"}}}


@pytest.fixture
def spy_dispatcher():
    calls = []
    dispatcher = WebhookDispatcher(ProcessedEvents(10))
    dispatcher.register(CHECKOUT_SESSION_COMPLETED)(calls.append)
    return dispatcher, calls


def test_known_type_is_dispatched_once(spy_dispatcher):
    dispatcher, calls = spy_dispatcher
    assert dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED)) is True
    assert calls == [{"id": "cs_test_123"}]


def test_unknown_type_is_logged_not_raised(spy_dispatcher, caplog):
    dispatcher, calls = spy_dispatcher
    with caplog.at_level(logging.INFO, logger="storefront.payments.webhooks"):
        assert dispatcher.dispatch(_event("customer.created")) is False
    assert calls == []
    assert "Unhandled event type customer.created" in caplog.text


def test_duplicate_event_id_is_not_redispatched(spy_dispatcher):
    dispatcher, calls = spy_dispatcher
    assert dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_dup")) is True
    assert dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_dup")) is False
    assert len(calls) == 1
    # Autre id: traité normalement
    assert dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_other")) is True
    assert len(calls) == 2


def test_dedup_disabled_with_zero_size():
    calls = []
    dispatcher = WebhookDispatcher(ProcessedEvents(0))
    dispatcher.register(CHECKOUT_SESSION_COMPLETED)(calls.append)
    dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_same"))
    dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_same"))
    assert len(calls) == 2


def test_processed_events_evicts_oldest_first():
    seen = ProcessedEvents(max_size=2)
    assert seen.add("evt_a") and seen.add("evt_b") and seen.add("evt_c")
    assert len(seen) == 2
    assert "evt_a" not in seen
    assert "evt_b" in seen and "evt_c" in seen
    # evt_a oublié: de nouveau accepté
    assert seen.add("evt_a") is True


def test_event_without_data_object_passes_empty_dict():
    calls = []
    dispatcher = WebhookDispatcher()
    dispatcher.register(PAYMENT_INTENT_SUCCEEDED)(calls.append)
    assert dispatcher.dispatch({"id": "evt_1", "type": PAYMENT_INTENT_SUCCEEDED}) is True
    assert calls == [{}]


def test_build_dispatcher_registers_default_handlers(caplog):
    dispatcher = build_dispatcher(dedup_size=5)
    assert dispatcher.event_types == [CHECKOUT_SESSION_COMPLETED, PAYMENT_INTENT_SUCCEEDED]
    with caplog.at_level(logging.INFO, logger="storefront.payments.webhooks"):
        dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, obj={"id": "cs_test_abc"}))
        dispatcher.dispatch(_event(PAYMENT_INTENT_SUCCEEDED, "evt_2", obj={"id": "pi_test_abc"}))
    assert "Checkout Session Completed: cs_test_abc" in caplog.text
    assert "Payment Intent Succeeded: pi_test_abc" in caplog.text


def test_failing_handler_does_not_mark_event_processed():
    attempts = []

    def flaky(obj):
        attempts.append(obj)
        if len(attempts) == 1:
            raise RuntimeError("fulfilment backend down")

    dispatcher = WebhookDispatcher(ProcessedEvents(10))
    dispatcher.register(CHECKOUT_SESSION_COMPLETED)(flaky)

    with pytest.raises(RuntimeError):
        dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_retry"))
    assert "evt_retry" not in dispatcher.processed

    # Relivraison Stripe: le handler est rappelé
    assert dispatcher.dispatch(_event(CHECKOUT_SESSION_COMPLETED, "evt_retry")) is True
    assert len(attempts) == 2
    assert "evt_retry" in dispatcher.processed


@pytest.mark.parametrize("data", ["oops", 42, ["object"], {"object": "cs_test_123"}])
def test_malformed_data_goes_to_default_branch(spy_dispatcher, caplog, data):
    dispatcher, calls = spy_dispatcher
    event = {"id": "evt_bad", "type": CHECKOUT_SESSION_COMPLETED, "data": data}
    with caplog.at_level(logging.INFO, logger="storefront.payments.webhooks"):
        assert dispatcher.dispatch(event) is False
        assert dispatcher.dispatch(event) is False
    assert calls == []
    assert "evt_bad" not in dispatcher.processed
    assert "duplicate" not in caplog.text
    assert caplog.text.count("webhook malformed data ignored id=evt_bad") == 2


@pytest.mark.parametrize("event_type", [["checkout.session.completed"], {"a": 1}, 7, None])
def test_non_string_type_is_unhandled(spy_dispatcher, caplog, event_type):
    dispatcher, calls = spy_dispatcher
    with caplog.at_level(logging.INFO, logger="storefront.payments.webhooks"):
        assert dispatcher.dispatch({"id": "evt_t", "type": event_type, "data": {"object": {}}}) is False
    assert calls == []
    assert "Unhandled event type" in caplog.text


def test_non_string_event_id_is_not_deduplicated(spy_dispatcher):
    dispatcher, calls = spy_dispatcher
    event = {"id": ["evt_1"], "type": CHECKOUT_SESSION_COMPLETED, "data": {"object": {"id": "cs_1"}}}
    assert dispatcher.dispatch(event) is True
    assert dispatcher.dispatch(event) is True
    assert len(calls) == 2
