"""
Agent events for the turn pipeline.

Every stage of a turn reports what it is doing as an AgentEvent. Observers
subscribe to an EventBus; a failing observer is logged and skipped so it
can never break a turn.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle phase of one pipeline step."""
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AgentEvent:
    """One step of the pipeline, as seen by observers."""
    agent: str
    phase: Phase
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "agent": self.agent,
            "phase": self.phase.value,
            "message": self.message,
            "data": dict(self.data),
            "timestamp": self.timestamp.isoformat(),
        }


EventHandler = Callable[[AgentEvent], None]


class EventBus:
    """Fans events out to subscribed handlers, in subscription order."""

    def __init__(self):
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler.

        Returns:
            A function that removes the handler again. Calling it twice is harmless.
        """
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(
        self,
        agent: str,
        phase: Phase,
        message: str,
        data: Optional[Dict[str, Any]] = None
    ) -> AgentEvent:
        """Build an event, log it and deliver it to every handler."""
        event = AgentEvent(agent, phase, message, data or {})

        level = logging.WARNING if phase == Phase.FAILED else logging.INFO
        logger.log(level, "[%s] %s", agent, message)

        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s event", handler, agent)

        return event

    def __len__(self) -> int:
        return len(self._handlers)
