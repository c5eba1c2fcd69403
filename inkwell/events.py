"""
Inkwell domain events
In-process fan-out of workflow events to subscribed handlers
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List
import uuid

from .logging_config import StructuredLogger, get_logger


# ============================================================
# EVENT TYPES
# ============================================================

APPROVAL_REQUESTED = "approval.requested"
APPROVAL_APPROVED = "approval.approved"
APPROVAL_REJECTED = "approval.rejected"
APPROVAL_CANCELLED = "approval.cancelled"
APPROVAL_COMMENTED = "approval.commented"

ALL_EVENTS = "*"


@dataclass
class Event:
    """Domain event delivered to subscribers"""
    type: str
    data: Dict = field(default_factory=dict)
    id: str = ""
    timestamp: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = f"evt_{uuid.uuid4().hex[:8]}"
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()


Handler = Callable[[Event], None]


# ============================================================
# EVENT BUS
# ============================================================

class EventBus:
    """Delivers events to handlers subscribed by type, or to all via ``"*"``.

    One bus is built per application in the lifespan hook and handed to
    services, never shared at module level.
    """

    def __init__(self, logger: StructuredLogger = None):
        self._handlers: Dict[str, List[Handler]] = {}
        self._logger = logger or get_logger("events")

    def subscribe(self, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: str, data: Dict) -> Event:
        """Deliver to every matching handler.

        Events describe committed state; a failing handler is logged and
        the remaining handlers still run.
        """
        event = Event(type=event_type, data=data)
        handlers = self._handlers.get(event_type, []) + self._handlers.get(ALL_EVENTS, [])
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(
                    "Event handler failed",
                    error=e,
                    event_type=event.type,
                    event_id=event.id,
                    handler=getattr(handler, "__name__", repr(handler)),
                )
        return event

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())


def log_event(logger: StructuredLogger) -> Handler:
    """Build a handler that writes each event to ``logger``"""
    def handler(event: Event) -> None:
        logger.info(event.type, event_id=event.id, **event.data)
    handler.__name__ = "log_event"
    return handler
