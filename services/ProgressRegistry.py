# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: ProgressRegistry.py
# -----------------------------------------------------------------------------
import json
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Set

from starlette.concurrency import run_in_threadpool

from settings import PROGRESS_DETACHED_TTL_SECONDS
from utility.logging_utils import get_class_logger

ProgressCallback = Callable[[str, str, Dict[str, Any]], None]

TERMINAL_EVENTS = frozenset(("complete", "error"))


def no_progress(event_type: str, message: str, data: Dict[str, Any]) -> None:
    return None


@dataclass
class ProgressEvent:
    type: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_sse(self) -> str:
        payload = {
            "type": self.type,
            "message": self.message,
            "data": self.data,
            "timestamp": self.timestamp,
        }
        return f"data: {json.dumps(payload, default=str)}\n\n"


class ProgressRegistry:
    """
    Open progress streams keyed by client session id.

    Owned by the AppContainer: created with the app, closed on shutdown.
    Publishers (ingestion runs in a worker thread) and the SSE endpoint
    (event loop) meet on a thread-safe queue per session.

    A session can be registered before its client connects, so early events
    are buffered. If no stream attaches, the session is dropped
    `detached_ttl_seconds` after its terminal event.
    """

    def __init__(
        self,
        *,
        heartbeat_seconds: float = 15.0,
        detached_ttl_seconds: float = PROGRESS_DETACHED_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self.heartbeat_seconds = heartbeat_seconds
        self.detached_ttl_seconds = detached_ttl_seconds
        self.clock = clock
        self.logger = logger or get_class_logger(self.__class__)
        self._lock = threading.Lock()
        self._queues: Dict[str, "queue.Queue[Optional[ProgressEvent]]"] = {}
        self._attached: Set[str] = set()
        # session_id -> clock() at its terminal event, for detached sessions only
        self._finished_at: Dict[str, float] = {}
        self._closed = False

    def register(self, session_id: str) -> "queue.Queue[Optional[ProgressEvent]]":
        self.prune_expired()
        with self._lock:
            if self._closed:
                raise RuntimeError("ProgressRegistry is closed")
            q = self._queues.get(session_id)
            if q is None:
                q = queue.Queue()
                self._queues[session_id] = q
                self.logger.info("Progress stream opened (session=%s, open=%d)", session_id, len(self._queues))
            return q

    def unregister(self, session_id: str) -> None:
        with self._lock:
            self._attached.discard(session_id)
            self._finished_at.pop(session_id, None)
            if self._queues.pop(session_id, None) is not None:
                self.logger.info("Progress stream closed (session=%s, open=%d)", session_id, len(self._queues))

    def open_sessions(self) -> List[str]:
        with self._lock:
            return list(self._queues)

    def publish(
        self,
        session_id: str,
        event_type: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Queue an event for a session. Returns False when nobody is listening."""
        with self._lock:
            q = self._queues.get(session_id)
            if q is not None and event_type in TERMINAL_EVENTS and session_id not in self._attached:
                self._finished_at[session_id] = self.clock()
        if q is None:
            return False
        q.put(ProgressEvent(type=event_type, message=message, data=dict(data or {})))
        self.prune_expired()
        return True

    def prune_expired(self) -> List[str]:
        """Drop finished sessions no stream attached to within the TTL."""
        now = self.clock()
        with self._lock:
            expired = [
                sid
                for sid, finished in self._finished_at.items()
                if now - finished >= self.detached_ttl_seconds and sid not in self._attached
            ]
            for sid in expired:
                self._finished_at.pop(sid, None)
                self._queues.pop(sid, None)
        if expired:
            self.logger.info("Dropped %d unclaimed progress stream(s): %s", len(expired), expired)
        return expired

    def callback_for(self, session_id: Optional[str]) -> ProgressCallback:
        if not session_id:
            return no_progress

        def _callback(event_type: str, message: str, data: Dict[str, Any]) -> None:
            self.publish(session_id, event_type, message, data)

        return _callback

    def close_all(self) -> None:
        with self._lock:
            self._closed = True
            queues = list(self._queues.values())
            self._queues.clear()
            self._attached.clear()
            self._finished_at.clear()
        for q in queues:
            q.put(None)
        self.logger.info("ProgressRegistry closed (%d open streams ended)", len(queues))

    def _attach(self, session_id: str) -> "queue.Queue[Optional[ProgressEvent]]":
        q = self.register(session_id)
        with self._lock:
            self._attached.add(session_id)
            self._finished_at.pop(session_id, None)
        return q

    async def stream(self, session_id: str) -> AsyncIterator[str]:
        """SSE lines for one session until a terminal event or registry shutdown."""
        q = self._attach(session_id)
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = await run_in_threadpool(q.get, True, self.heartbeat_seconds)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                if event is None:
                    break
                yield event.to_sse()
                if event.type in TERMINAL_EVENTS:
                    break
        finally:
            self.unregister(session_id)
