"""
Approval request and action data access.

Every read states what it eager-loads. Relationships on the approval models
are ``lazy="raise"``, so touching anything not listed here is an error rather
than a hidden query.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models.approval import ApprovalAction, ApprovalActionType, ApprovalRequest, ApprovalStatus


class ApprovalRepository:
    """Repository for approval requests and their action log."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @staticmethod
    def _with_details(stmt):
        """Load ``post``, ``requester`` and ``actions`` (each with ``approver``).

        ``populate_existing`` makes reads inside a long-lived session reflect
        rows committed by other transactions.
        """
        return stmt.options(
            selectinload(ApprovalRequest.post),
            selectinload(ApprovalRequest.requester),
            selectinload(ApprovalRequest.actions).selectinload(ApprovalAction.approver),
        ).execution_options(populate_existing=True)

    def get(self, request_id: int) -> Optional[ApprovalRequest]:
        """Get a request with post, requester and actions (newest first).

        Args:
            request_id: Approval request ID

        Returns:
            ApprovalRequest or None
        """
        stmt = self._with_details(select(ApprovalRequest).where(ApprovalRequest.id == request_id))
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_post_id(self, post_id: int) -> Optional[ApprovalRequest]:
        """Get the request row for a post, whatever its status. Same loading as ``get``."""
        stmt = self._with_details(select(ApprovalRequest).where(ApprovalRequest.post_id == post_id))
        return self.session.execute(stmt).scalar_one_or_none()

    def list_pending(self) -> List[ApprovalRequest]:
        """PENDING requests, oldest first (review queue order). Same loading as ``get``."""
        stmt = self._with_details(
            select(ApprovalRequest)
            .where(ApprovalRequest.status == ApprovalStatus.PENDING.value)
            .order_by(ApprovalRequest.created_at.asc(), ApprovalRequest.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_by_requester(self, requester_id: int) -> List[ApprovalRequest]:
        """All requests submitted by a user, newest first. Same loading as ``get``."""
        stmt = self._with_details(
            select(ApprovalRequest)
            .where(ApprovalRequest.requester_id == requester_id)
            .order_by(ApprovalRequest.created_at.desc(), ApprovalRequest.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def current_status(self, request_id: int) -> Optional[str]:
        """Read the status column straight from the database, bypassing the identity map."""
        stmt = select(ApprovalRequest.status).where(ApprovalRequest.id == request_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def add(self, request: ApprovalRequest) -> ApprovalRequest:
        """Stage a new request and flush so its ID is assigned. Does not commit."""
        self.session.add(request)
        self.session.flush()
        return request

    def compare_and_set_status(
        self,
        request_id: int,
        expected: ApprovalStatus,
        target: ApprovalStatus,
        when: datetime,
    ) -> bool:
        """Move a request from ``expected`` to ``target`` in a single UPDATE.

        Args:
            request_id: Approval request ID
            expected: Status the row must still have
            target: Status to write
            when: Value for ``updated_at``

        Returns:
            True if this call changed the row, False if another transaction
            already moved it away from ``expected``
        """
        stmt = (
            update(ApprovalRequest)
            .where(ApprovalRequest.id == request_id, ApprovalRequest.status == expected.value)
            .values(status=target.value, updated_at=when)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def add_action(
        self,
        request_id: int,
        approver_id: int,
        action_type: ApprovalActionType,
        comment: Optional[str],
        when: datetime,
    ) -> ApprovalAction:
        """Append an action to the log and flush. Does not commit."""
        action = ApprovalAction(
            request_id=request_id,
            approver_id=approver_id,
            action_type=action_type.value,
            comment=comment,
            created_at=when,
        )
        self.session.add(action)
        self.session.flush()
        return action

    def get_action(self, action_id: int) -> Optional[ApprovalAction]:
        """Get an action with ``approver`` and ``request`` (plus its ``post`` and ``requester``).

        The request's own ``actions`` collection is not loaded.
        """
        stmt = (
            select(ApprovalAction)
            .where(ApprovalAction.id == action_id)
            .options(
                joinedload(ApprovalAction.approver),
                joinedload(ApprovalAction.request).joinedload(ApprovalRequest.post),
                joinedload(ApprovalAction.request).joinedload(ApprovalRequest.requester),
            )
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()
