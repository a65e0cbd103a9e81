"""
Test-lifecycle events and their JSON-lines log format.

A runner drives the aggregator either by calling its ``on_*`` callbacks
directly or by emitting these event objects, in order::

    RunBegin, (SuiteBegin, (TestBegin, TestEnd)*)*, RunEnd

Each event serializes to one JSON object per line with an ``"event"`` key::

    {"event": "suite_begin", "title": "Login Tests"}
    {"event": "test_begin", "title": "valid login", "file": "tests/e2e/auth/login.spec.ts"}
    {"event": "test_end", "status": "failed", "duration": 800, "error": {"message": "Timeout"}}
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from .result import Attachment, TestOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunBegin:
    pass


@dataclass(frozen=True)
class SuiteBegin:
    title: str = ""


@dataclass(frozen=True)
class TestBegin:
    title: str
    file: Optional[str] = None


@dataclass(frozen=True)
class TestEnd:
    status: str
    duration: float = 0
    error: Optional[Dict[str, Any]] = None
    attachments: List[Dict[str, Any]] = field(default_factory=list)

    def to_outcome(self) -> TestOutcome:
        """Normalize the runner payload. Inline attachment bodies are not kept."""
        message = None
        if self.error:
            message = self.error.get('message')
        return TestOutcome(
            status=self.status,
            duration_ms=self.duration,
            error_message=message,
            attachments=[
                Attachment(name=a.get('name', ''), path=a.get('path') or '')
                for a in self.attachments or []
            ],
        )


@dataclass(frozen=True)
class RunEnd:
    pass


Event = Union[RunBegin, SuiteBegin, TestBegin, TestEnd, RunEnd]

EVENT_TYPES = {
    'run_begin': RunBegin,
    'suite_begin': SuiteBegin,
    'test_begin': TestBegin,
    'test_end': TestEnd,
    'run_end': RunEnd,
}
_EVENT_NAMES = {cls: name for name, cls in EVENT_TYPES.items()}


def dispatch(aggregator, event: Event):
    """Invoke the aggregator callback matching ``event``.

    Returns the report path for ``RunEnd`` and ``None`` otherwise.
    """
    if isinstance(event, RunBegin):
        aggregator.on_run_begin()
    elif isinstance(event, SuiteBegin):
        aggregator.on_suite_begin(event.title)
    elif isinstance(event, TestBegin):
        aggregator.on_test_begin(event.title, file=event.file)
    elif isinstance(event, TestEnd):
        aggregator.on_test_end(event.to_outcome())
    elif isinstance(event, RunEnd):
        return aggregator.on_run_end()
    else:
        raise TypeError(f"Unsupported event type: {type(event).__name__}")
    return None


def replay(events: Iterable[Event], aggregator) -> Optional[Path]:
    """Dispatch ``events`` in order, returning the report path if the run ended."""
    report_path = None
    for event in events:
        result = dispatch(aggregator, event)
        if result is not None:
            report_path = result
    return report_path


def event_from_dict(data: Dict[str, Any]) -> Event:
    """Build an event from its JSON object form."""
    payload = dict(data)
    name = payload.pop('event', None)
    if name not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {name!r}")
    return EVENT_TYPES[name](**payload)


def event_to_dict(event: Event) -> Dict[str, Any]:
    data = {'event': _EVENT_NAMES[type(event)]}
    data.update({k: v for k, v in vars(event).items() if v is not None})
    return data


def read_event_log(path: Union[str, Path]) -> Iterator[Event]:
    """Yield events from a JSON-lines log, skipping blank lines."""
    with open(path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                yield event_from_dict(json.loads(line))
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                raise ValueError(f"{path}:{line_number}: invalid event: {e}") from e


def write_event_log(path: Union[str, Path], events: Iterable[Event]):
    """Write events as JSON lines."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        for event in events:
            f.write(json.dumps(event_to_dict(event)) + "\n")
    logger.debug(f"Event log written: {path}")
