import threading

import pytest

from research_chat.model import DisplayEntry, Message
from research_chat.util.cancellation import CancellationEvent
from research_chat.util.json import make_json_safe
from research_chat.util.signals import Signal
from research_chat.util.time import timestamp_message_id

pytestmark = pytest.mark.unit


def test_cancellation_event_set_from_other_thread():
    event = CancellationEvent()
    assert not event.cancelled

    worker = threading.Thread(target=event.set)
    worker.start()
    worker.join()

    assert event.cancelled
    event.clear()
    assert not event.cancelled


def test_signal_runs_listeners_in_order_and_disconnects():
    signal = Signal()
    calls = []

    def first(value):
        calls.append(("first", value))

    def second(value):
        calls.append(("second", value))

    signal.connect(first)
    signal.connect(second)
    signal.emit(1)
    signal.disconnect(first)
    signal.disconnect(first)
    signal.emit(2)

    assert calls == [("first", 1), ("second", 1), ("second", 2)]
    assert len(signal) == 1


def test_make_json_safe_handles_entries_and_sets():
    value = {
        1: (DisplayEntry("Reflection", "ok"),),
        "tags": {"b", "a"},
        "obj": object,
    }

    safe = make_json_safe(value)

    assert safe["1"] == [{"title": "Reflection", "data": "ok"}]
    assert safe["tags"] == ["a", "b"]
    assert safe["obj"] == repr(object)


def test_timestamp_message_id_is_millisecond_digits():
    value = timestamp_message_id()

    assert value.isdigit()
    assert len(value) >= 13


def test_message_from_dict_joins_content_parts():
    message = Message.from_dict(
        {
            "id": 7,
            "type": "ai",
            "content": [{"type": "text", "text": "Hello "}, "world", {"type": "image"}],
        }
    )

    assert message == Message(id="7", type="ai", content="Hello world")
    assert message.is_ai
