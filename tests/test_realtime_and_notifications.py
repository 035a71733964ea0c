import logging

from gigboard.services import notifications
from gigboard.services.events import ApplicationAccepted, MessageReceived
from gigboard.services.notifications import NotificationInbox, close_all, inbox_for
from gigboard.services.realtime import EventHub


def test_publish_reaches_matching_subscribers_only():
    hub = EventHub()
    seen_all, seen_msgs = [], []
    hub.subscribe(None, seen_all.append)
    hub.subscribe(lambda e: isinstance(e, MessageReceived), seen_msgs.append)

    msg = MessageReceived(sender_id="B", receiver_id="A", content="hi")
    accepted = ApplicationAccepted(applicant_id="B", job_id="j1")
    assert hub.publish(msg) == 2
    assert hub.publish(accepted) == 1
    assert seen_all == [msg, accepted]
    assert seen_msgs == [msg]


def test_failing_handler_does_not_block_others(caplog):
    hub = EventHub()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    hub.subscribe(None, broken)
    hub.subscribe(None, seen.append)
    with caplog.at_level(logging.ERROR, logger="gigboard.services.realtime"):
        delivered = hub.publish(ApplicationAccepted(applicant_id="B", job_id="j1"))
    assert delivered == 1
    assert len(seen) == 1
    assert "failed on ApplicationAccepted" in caplog.text


def test_unsubscribe_and_clear():
    hub = EventHub()
    seen = []
    token = hub.subscribe(None, seen.append)
    assert hub.subscriber_count() == 1
    assert hub.unsubscribe(token) is True
    assert hub.unsubscribe(token) is False
    hub.publish(ApplicationAccepted(applicant_id="B", job_id="j1"))
    assert seen == []
    hub.subscribe(None, seen.append)
    hub.clear()
    assert hub.subscriber_count() == 0


def test_inbox_collects_only_viewer_events():
    hub = EventHub()
    inbox = NotificationInbox("A", hub)
    inbox.start()
    hub.publish(MessageReceived(sender_id="B", receiver_id="A", content="hello", sender_name="bina"))
    hub.publish(MessageReceived(sender_id="A", receiver_id="B", content="reply"))
    hub.publish(ApplicationAccepted(applicant_id="A", job_id="j9", job_title="Stage crew"))

    assert inbox.pending_count() == 2
    drained = inbox.drain()
    assert [p.target_route for p in drained] == ["/chat/B", "/my-applications"]
    assert inbox.drain() == []


def test_inbox_drops_invalid_events(caplog):
    hub = EventHub()
    inbox = NotificationInbox("A", hub)
    inbox.start()
    with caplog.at_level(logging.WARNING, logger="gigboard.services.notifications"):
        hub.publish(MessageReceived(sender_id="A", receiver_id="A", content="self"))
    assert inbox.pending_count() == 0
    assert "Dropping invalid MessageReceived" in caplog.text


def test_inbox_is_bounded():
    hub = EventHub()
    inbox = NotificationInbox("A", hub, maxlen=3)
    inbox.start()
    for i in range(5):
        hub.publish(MessageReceived(sender_id="B", receiver_id="A", content=f"m{i}"))
    assert [p.body for p in inbox.drain()] == ["m2", "m3", "m4"]


def test_inbox_start_stop_is_idempotent():
    hub = EventHub()
    inbox = NotificationInbox("A", hub)
    inbox.start()
    inbox.start()
    assert hub.subscriber_count() == 1
    assert inbox.active
    inbox.stop()
    inbox.stop()
    assert not inbox.active
    assert hub.subscriber_count() == 0


def test_inbox_registry_reuses_and_closes():
    hub = EventHub()
    first = inbox_for("A", hub)
    assert inbox_for("A", hub) is first
    inbox_for("B", hub)
    assert hub.subscriber_count() == 2
    assert close_all() == 2
    assert hub.subscriber_count() == 0
    assert notifications._inboxes == {}
