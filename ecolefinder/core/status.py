from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional

logger = logging.getLogger(__name__)

Severity = Literal["error", "success", ""]


@dataclass(frozen=True)
class StatusEvent:
    message: str
    severity: Severity = ""
    # Number of the search that emitted the event, None outside a search.
    sequence: Optional[int] = None


class StatusChannel:
    """Human-readable progress of a search; the last event is what the user sees."""

    def __init__(self):
        self.events: List[StatusEvent] = []
        self._listeners: List[Callable[[StatusEvent], None]] = []

    def subscribe(self, listener: Callable[[StatusEvent], None]) -> None:
        self._listeners.append(listener)

    def emit(self, message: str, severity: Severity = "", sequence: Optional[int] = None) -> StatusEvent:
        event = StatusEvent(message=message, severity=severity, sequence=sequence)
        self.events.append(event)
        logger.info("status [%s] %s", severity or "info", message)
        for listener in self._listeners:
            listener(event)
        return event

    @property
    def current(self) -> StatusEvent | None:
        return self.events[-1] if self.events else None

    def for_search(self, sequence: int, is_latest: Callable[[int], bool]) -> "SearchStatus":
        return SearchStatus(self, sequence, is_latest)


class SearchStatus:
    """
    The channel as seen by one search: events carry its sequence number, and
    nothing is emitted once a newer search has started.
    """

    def __init__(self, channel: StatusChannel, sequence: int, is_latest: Callable[[int], bool]):
        self.channel = channel
        self.sequence = sequence
        self.is_latest = is_latest

    def emit(self, message: str, severity: Severity = "") -> StatusEvent | None:
        if not self.is_latest(self.sequence):
            logger.debug("search #%d superseded, status dropped: %s", self.sequence, message)
            return None
        return self.channel.emit(message, severity, sequence=self.sequence)

    @property
    def events(self) -> List[StatusEvent]:
        return self.channel.events

    @property
    def current(self) -> StatusEvent | None:
        return self.channel.current
