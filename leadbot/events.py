"""Per-session event stream for pushing conversation updates to the widget.

Lead prompts are emitted after a pacing delay, outside any request the
widget made, so the widget subscribes to the session's stream to receive
them. Each appended message and each flag change becomes one event, fanned
out to every subscriber's asyncio.Queue.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, TypedDict

log = logging.getLogger("leadbot.events")


class SessionEvent(TypedDict):
    type: str          # message | state
    timestamp: float
    session_id: str
    seq: int           # position in the session's event history
    data: dict[str, Any]


class SessionEventStream:
    """Fans session events out to subscriber queues and keeps a history.

    Only the newest ``history_size`` events are kept for replay; ``seq``
    keeps counting past the ones dropped.
    """

    def __init__(
        self, session_id: str = "", maxsize: int = 200, history_size: int = 500,
    ) -> None:
        self.session_id = session_id
        self._maxsize = maxsize
        self._subscribers: list[asyncio.Queue[SessionEvent]] = []
        self._history: deque[SessionEvent] = deque(maxlen=history_size)
        self._seq = 0

    def subscribe(self, replay: bool = False) -> asyncio.Queue[SessionEvent]:
        """Create a subscriber queue, optionally pre-filled with past events."""
        q: asyncio.Queue[SessionEvent] = asyncio.Queue(maxsize=self._maxsize)
        if replay:
            for event in list(self._history)[-self._maxsize:]:
                q.put_nowait(event)
        self._subscribers.append(q)
        log.debug("Subscriber added for session %s (total: %d)",
                  self.session_id, len(self._subscribers))
        return q

    def unsubscribe(self, q: asyncio.Queue[SessionEvent]) -> None:
        if q in self._subscribers:
            self._subscribers.remove(q)

    def publish(self, event_type: str, data: dict[str, Any]) -> SessionEvent:
        event: SessionEvent = {
            "type": event_type,
            "timestamp": time.time(),
            "session_id": self.session_id,
            "seq": self._seq,
            "data": data,
        }
        self._seq += 1
        self._history.append(event)

        for q in self._subscribers:
            if q.full():
                # A slow reader loses its oldest event, never the newest
                q.get_nowait()
            q.put_nowait(event)
        return event

    @property
    def history(self) -> list[SessionEvent]:
        return list(self._history)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
