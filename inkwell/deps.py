"""
Request-scoped dependencies shared by routers.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .database import get_db
from .events import EventBus
from .services.approvals import ApprovalService


def get_event_bus(request: Request) -> EventBus:
    """The application's event bus, built in the lifespan hook."""
    return request.app.state.event_bus


def get_approval_service(
    db: Session = Depends(get_db),
    events: EventBus = Depends(get_event_bus),
) -> ApprovalService:
    return ApprovalService(db, events)
