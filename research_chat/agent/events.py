"""Classify research agent progress events into timeline entries.

The agent server streams one update per graph node.  Each update is a mapping
keyed by the node name, for example ``{"web_research": {...}}``.  Updates are
parsed into a closed set of event variants and every variant renders itself as
a :class:`~research_chat.model.DisplayEntry`.

Priority contract
-----------------
An update may carry more than one recognised node key.  Keys are checked in the
order of :data:`EVENT_PRIORITY` and the first present key wins; the remaining
keys are ignored.  ``planner_node`` and ``planner`` share one slot, with
``planner_node`` preferred.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from ..i18n import _
from ..model import DisplayEntry
from ..telemetry import log_event


logger = logging.getLogger(__name__)


# Backend nodes known to emit updates that have no timeline representation.
UNHANDLED_NODE_HINTS: tuple[str, ...] = (
    "should_enhance_content",
    "decide_next_research_step",
    "decide_next_step_in_plan",
)


def _is_present(value: Any) -> bool:
    """Return ``True`` for values the agent uses to signal a populated field.

    Empty mappings and lists count as present; ``None``, ``False``, zero and
    the empty string do not.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return []


def _join_text(values: Sequence[Any]) -> str:
    return ", ".join("" if item is None else str(item) for item in values)


# ----------------------------------------------------------------------
# Event variants


@dataclass(frozen=True, slots=True)
class GenerateQueryEvent:
    kind: ClassVar[str] = "generate_query"

    query_list: tuple[Any, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GenerateQueryEvent:
        return cls(query_list=tuple(_as_list(payload.get("query_list"))))

    def to_entry(self) -> DisplayEntry:
        return DisplayEntry(_("Generating Search Queries"), _join_text(self.query_list))


@dataclass(frozen=True, slots=True)
class WebResearchEvent:
    kind: ClassVar[str] = "web_research"
    max_labels: ClassVar[int] = 3

    source_count: int = 0
    labels: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> WebResearchEvent:
        sources = _as_list(payload.get("sources_gathered"))
        labels: list[str] = []
        for source in sources:
            label = _as_mapping(source).get("label")
            if not _is_present(label):
                continue
            text = str(label)
            if text not in labels:
                labels.append(text)
        return cls(source_count=len(sources), labels=tuple(labels))

    def to_entry(self) -> DisplayEntry:
        examples = ", ".join(self.labels[: self.max_labels]) or "N/A"
        data = _("Gathered {count} sources. Related to: {labels}.").format(
            count=self.source_count, labels=examples
        )
        return DisplayEntry(_("Web Research"), data)


@dataclass(frozen=True, slots=True)
class ReflectionEvent:
    kind: ClassVar[str] = "reflection"

    is_sufficient: bool = False
    follow_up_queries: tuple[Any, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ReflectionEvent:
        return cls(
            is_sufficient=_is_present(payload.get("reflection_is_sufficient")),
            follow_up_queries=tuple(
                _as_list(payload.get("reflection_follow_up_queries"))
            ),
        )

    def to_entry(self) -> DisplayEntry:
        if self.is_sufficient:
            data = _("Search successful, generating final answer.")
        else:
            data = _("Need more information, searching for {queries}").format(
                queries=_join_text(self.follow_up_queries)
            )
        return DisplayEntry(_("Reflection"), data)


@dataclass(frozen=True, slots=True)
class PlannerEvent:
    kind: ClassVar[str] = "planner"

    task_count: int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> PlannerEvent:
        plan = payload.get("plan")
        if isinstance(plan, Sequence) and not isinstance(plan, (str, bytes)):
            return cls(task_count=len(plan))
        return cls()

    def to_entry(self) -> DisplayEntry:
        if self.task_count is None:
            data = _("Analyzing research requirements...")
        else:
            data = _("Generated {count} research tasks").format(count=self.task_count)
        return DisplayEntry(_("Planning Research Strategy"), data)


@dataclass(frozen=True, slots=True)
class ContentAnalysisEvent:
    kind: ClassVar[str] = "content_enhancement_analysis"

    needs_enhancement: bool = False
    reasoning: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ContentAnalysisEvent:
        reasoning = payload.get("reasoning")
        return cls(
            needs_enhancement=_is_present(payload.get("needs_enhancement")),
            reasoning=str(reasoning) if _is_present(reasoning) else None,
        )

    def to_entry(self) -> DisplayEntry:
        if self.needs_enhancement:
            data = _("Enhancement needed: {reasoning}").format(
                reasoning=self.reasoning or _("Analyzing content quality")
            )
        else:
            data = _("Content quality sufficient, proceeding with report generation")
        return DisplayEntry(_("Content Enhancement Analysis"), data)


@dataclass(frozen=True, slots=True)
class ResearchEvaluationEvent:
    kind: ClassVar[str] = "evaluate_research_enhanced"

    is_sufficient: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ResearchEvaluationEvent:
        return cls(is_sufficient=_is_present(payload.get("evaluation_is_sufficient")))

    def to_entry(self) -> DisplayEntry:
        if self.is_sufficient:
            data = _("Research meets quality standards")
        else:
            data = _("Additional research required")
        return DisplayEntry(_("Research Quality Evaluation"), data)


def _enhancement_status_messages() -> dict[str, str]:
    return {
        "skipped": _("Content enhancement skipped - quality sufficient"),
        "completed": _("Content enhancement completed successfully"),
        "failed": _("Content enhancement failed"),
        "error": _("Content enhancement encountered errors"),
        "analyzing": _("Analyzing content enhancement needs"),
        "skipped_no_api": _("Content enhancement skipped - no API key"),
    }


@dataclass(frozen=True, slots=True)
class ContentEnhancementEvent:
    kind: ClassVar[str] = "content_enhancement"

    status: str = "unknown"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ContentEnhancementEvent:
        status = payload.get("enhancement_status")
        return cls(status=str(status) if _is_present(status) else "unknown")

    def to_entry(self) -> DisplayEntry:
        message = _enhancement_status_messages().get(self.status)
        if message is None:
            message = _("Status: {status}").format(status=self.status)
        return DisplayEntry(_("Content Enhancement Analysis"), message)


@dataclass(frozen=True, slots=True)
class TaskCompletionEvent:
    kind: ClassVar[str] = "record_task_completion"

    next_node_decision: str = "continue"
    task_description: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TaskCompletionEvent:
        decision = payload.get("next_node_decision")
        ledger = _as_list(payload.get("ledger"))
        description: str | None = None
        if ledger:
            raw = _as_mapping(ledger[0]).get("description")
            if _is_present(raw):
                description = str(raw)
        return cls(
            next_node_decision=str(decision) if _is_present(decision) else "continue",
            task_description=description,
        )

    def to_entry(self) -> DisplayEntry:
        task = self.task_description or _("Unknown task")
        if self.next_node_decision == "end":
            data = _("All tasks completed. Final task: {task}").format(task=task)
        else:
            data = _("Task completed: {task}. Moving to next task.").format(task=task)
        return DisplayEntry(_("Task Completion Recorded"), data)


@dataclass(frozen=True, slots=True)
class FinalizeAnswerEvent:
    kind: ClassVar[str] = "finalize_answer"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> FinalizeAnswerEvent:
        return cls()

    def to_entry(self) -> DisplayEntry:
        return DisplayEntry(
            _("Finalizing Answer"), _("Composing and presenting the final answer.")
        )


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """Update without any recognised node key."""

    kind: ClassVar[str | None] = None

    keys: tuple[str, ...] = ()

    def to_entry(self) -> None:
        return None


ResearchEvent = (
    GenerateQueryEvent
    | WebResearchEvent
    | ReflectionEvent
    | PlannerEvent
    | ContentAnalysisEvent
    | ResearchEvaluationEvent
    | ContentEnhancementEvent
    | TaskCompletionEvent
    | FinalizeAnswerEvent
    | UnknownEvent
)


# Ordered (node keys, parser) pairs; the order is the priority contract.
_EVENT_PARSERS: tuple[
    tuple[tuple[str, ...], Callable[[Mapping[str, Any]], ResearchEvent]], ...
] = (
    (("generate_query",), GenerateQueryEvent.from_payload),
    (("web_research",), WebResearchEvent.from_payload),
    (("reflection",), ReflectionEvent.from_payload),
    (("planner_node", "planner"), PlannerEvent.from_payload),
    (("content_enhancement_analysis",), ContentAnalysisEvent.from_payload),
    (("evaluate_research_enhanced",), ResearchEvaluationEvent.from_payload),
    (("content_enhancement",), ContentEnhancementEvent.from_payload),
    (("record_task_completion",), TaskCompletionEvent.from_payload),
    (("finalize_answer",), FinalizeAnswerEvent.from_payload),
)

EVENT_PRIORITY: tuple[str, ...] = tuple(
    key for keys, _parser in _EVENT_PARSERS for key in keys
)


def parse_update_event(raw: Mapping[str, Any] | Any) -> ResearchEvent:
    """Return the highest-priority event variant carried by *raw*."""
    update = _as_mapping(raw)
    for keys, parser in _EVENT_PARSERS:
        for key in keys:
            payload = update.get(key)
            if _is_present(payload):
                return parser(_as_mapping(payload))
    return UnknownEvent(keys=tuple(str(key) for key in update))


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Outcome of classifying one streamed update."""

    entry: DisplayEntry | None
    kind: str | None = None
    finalizes: bool = False

    @property
    def processed(self) -> bool:
        return self.entry is not None


def classify_event(raw: Mapping[str, Any] | Any) -> ClassificationResult:
    """Classify a streamed update into an optional timeline entry.

    Unrecognised updates produce an empty result and a warning-level
    ``EVENT_UNHANDLED`` record; they are never treated as errors.
    """
    keys = sorted(str(key) for key in _as_mapping(raw))
    log_event("EVENT_RECEIVED", {"keys": keys}, level=logging.DEBUG)
    event = parse_update_event(raw)
    if isinstance(event, UnknownEvent):
        log_event(
            "EVENT_UNHANDLED",
            {
                "keys": list(event.keys),
                "event_type": type(raw).__name__,
                "possible_missing_handlers": list(UNHANDLED_NODE_HINTS),
            },
            level=logging.WARNING,
        )
        return ClassificationResult(entry=None)
    entry = event.to_entry()
    logger.debug("Processed %s update as %r", event.kind, entry.title)
    return ClassificationResult(
        entry=entry,
        kind=event.kind,
        finalizes=isinstance(event, FinalizeAnswerEvent),
    )


__all__ = [
    "EVENT_PRIORITY",
    "ClassificationResult",
    "ContentAnalysisEvent",
    "ContentEnhancementEvent",
    "FinalizeAnswerEvent",
    "GenerateQueryEvent",
    "PlannerEvent",
    "ReflectionEvent",
    "ResearchEvaluationEvent",
    "ResearchEvent",
    "TaskCompletionEvent",
    "UnknownEvent",
    "WebResearchEvent",
    "classify_event",
    "parse_update_event",
]
