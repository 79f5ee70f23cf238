"""Pytest configuration for the research_chat test suite."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pytest

from research_chat import i18n
from research_chat.model import Message, SubmitPayload
from research_chat.transport.base import TransportSignals


def _normalise_marker_name(name: str) -> str:
    return name.replace("-", "_")


@dataclass(frozen=True)
class SuiteDefinition:
    """Describe how a logical test suite should filter collected tests."""

    name: str
    exclude_any: Sequence[str] = ()
    description: str = ""

    def should_run(self, item: pytest.Item) -> bool:
        markers = {_normalise_marker_name(marker.name) for marker in item.iter_markers()}
        excluded = {_normalise_marker_name(name) for name in self.exclude_any}
        return not markers & excluded


SUITES: Mapping[str, SuiteDefinition] = {
    "core": SuiteDefinition(
        name="core",
        exclude_any=("network",),
        description="Classifier, session, settings and CLI checks",
    ),
    "full": SuiteDefinition(
        name="full",
        description="Everything, including mocked HTTP transport flows",
    ),
}

_SUITE_STASH_KEY = pytest.StashKey[SuiteDefinition]()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--suite",
        action="store",
        choices=sorted(SUITES),
        help="Select the logical test suite to run",
    )


def pytest_configure(config: pytest.Config) -> None:
    suite_name = config.getoption("--suite")
    if suite_name is None:
        return
    config.stash[_SUITE_STASH_KEY] = SUITES[suite_name]


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    suite = config.stash.get(_SUITE_STASH_KEY, None)
    if suite is None:
        return

    selected: list[pytest.Item] = []
    deselected: list[pytest.Item] = []
    for item in items:
        if suite.should_run(item):
            selected.append(item)
        else:
            deselected.append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path_factory, monkeypatch):
    """Keep log files out of the home directory and translations neutral."""

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("RESEARCH_CHAT_LOG_DIR", str(log_dir))
    for name in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(name, raising=False)
    i18n.reset()
    yield
    i18n.reset()


class FakeTransport:
    """In-memory transport recording submissions and replaying thread changes."""

    def __init__(self, messages: Sequence[Message] = ()) -> None:
        self.signals = TransportSignals()
        self._messages: tuple[Message, ...] = tuple(messages)
        self._is_loading = False
        self.submitted: list[SubmitPayload] = []
        self.stop_calls = 0
        self.on_submit: Callable[[FakeTransport, SubmitPayload], None] | None = None

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def submit(self, payload: SubmitPayload) -> None:
        self.submitted.append(payload)
        self.set_thread(messages=payload.messages, is_loading=True)
        if self.on_submit is not None:
            self.on_submit(self, payload)

    def stop(self) -> None:
        self.stop_calls += 1

    def emit_update(self, raw: Mapping[str, Any]) -> None:
        self.signals.update_received.emit(raw)

    def set_thread(
        self,
        *,
        messages: Sequence[Message] | None = None,
        is_loading: bool | None = None,
    ) -> None:
        if messages is not None:
            self._messages = tuple(messages)
        if is_loading is not None:
            self._is_loading = is_loading
        self.signals.thread_changed.emit()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
