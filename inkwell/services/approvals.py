"""
Approval workflow service.

Authors submit a post for review, a privileged approver approves or rejects
it, and approval publishes the post in the same transaction. Status changes
are applied with a compare-and-set UPDATE so that two racing reviewers cannot
both win: the loser sees a ConflictError.
"""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..events import (
    APPROVAL_APPROVED,
    APPROVAL_CANCELLED,
    APPROVAL_COMMENTED,
    APPROVAL_REJECTED,
    APPROVAL_REQUESTED,
    EventBus,
)
from ..logging_config import approvals_logger, timed
from ..models.approval import ApprovalAction, ApprovalActionType, ApprovalRequest, ApprovalStatus
from ..repositories import ApprovalRepository, PostRepository
from ..responses import ConflictError, ForbiddenError, not_found
from .state_machine import ensure_transition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApprovalService:
    """Approval request lifecycle bound to one database session."""

    def __init__(self, db: Session, events: Optional[EventBus] = None, settings: Optional[Settings] = None):
        self.db = db
        self.requests = ApprovalRepository(db)
        self.posts = PostRepository(db)
        self.events = events or EventBus()
        self.settings = settings or get_settings()

    # ============================================================
    # QUERIES
    # ============================================================

    def get(self, request_id: int) -> ApprovalRequest:
        request = self.requests.get(request_id)
        if request is None:
            not_found("Approval request", request_id)
        return request

    def get_by_post_id(self, post_id: int) -> Optional[ApprovalRequest]:
        """Request for a post, or None. The post itself must exist."""
        if self.posts.get(post_id) is None:
            not_found("Post", post_id)
        return self.requests.get_by_post_id(post_id)

    def list_pending(self) -> List[ApprovalRequest]:
        return self.requests.list_pending()

    def list_by_requester(self, requester_id: int) -> List[ApprovalRequest]:
        return self.requests.list_by_requester(requester_id)

    # ============================================================
    # MUTATIONS
    # ============================================================

    @timed(approvals_logger)
    def create_request(self, post_id: int, requester_id: int, message: Optional[str] = None) -> ApprovalRequest:
        """Submit a post for review. Only its author may do this, and only once per post."""
        post = self.posts.get(post_id)
        if post is None:
            not_found("Post", post_id)
        if post.author_id != requester_id:
            raise ForbiddenError(
                "Only the post author can submit it for approval",
                {"post_id": post_id},
            )

        existing = self.requests.get_by_post_id(post_id)
        if existing is not None:
            raise self._already_requested(existing)

        request = ApprovalRequest(
            post_id=post_id,
            requester_id=requester_id,
            status=ApprovalStatus.PENDING.value,
            request_message=message,
        )
        try:
            self.requests.add(request)
            request_id = request.id
            self.db.commit()
        except IntegrityError:
            # Lost a race with another submission for the same post
            self.db.rollback()
            existing = self.requests.get_by_post_id(post_id)
            if existing is None:
                raise
            raise self._already_requested(existing)
        except Exception:
            self.db.rollback()
            raise

        approvals_logger.info(
            "Approval requested",
            request_id=request_id,
            post_id=post_id,
            requester_id=requester_id,
        )
        self.events.emit(APPROVAL_REQUESTED, {
            "request_id": request_id,
            "post_id": post_id,
            "actor_id": requester_id,
            "status": ApprovalStatus.PENDING.value,
        })
        return self.get(request_id)

    @timed(approvals_logger)
    def approve(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> ApprovalRequest:
        """Approve a pending request and publish its post, all in one transaction."""
        return self._decide(
            request_id,
            approver_id,
            comment,
            target=ApprovalStatus.APPROVED,
            action_type=ApprovalActionType.APPROVE,
            event_type=APPROVAL_APPROVED,
        )

    @timed(approvals_logger)
    def reject(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> ApprovalRequest:
        """Reject a pending request. The post is left untouched."""
        return self._decide(
            request_id,
            approver_id,
            comment,
            target=ApprovalStatus.REJECTED,
            action_type=ApprovalActionType.REJECT,
            event_type=APPROVAL_REJECTED,
        )

    @timed(approvals_logger)
    def cancel(self, request_id: int, requester_id: int) -> ApprovalRequest:
        """Withdraw a pending request. Only the original requester may cancel; nothing is logged as an action."""
        request = self.get(request_id)
        if request.requester_id != requester_id:
            raise ForbiddenError(
                "Only the requester can cancel this approval request",
                {"request_id": request_id},
            )
        ensure_transition(request.status, ApprovalStatus.CANCELLED)
        post_id = request.post_id

        try:
            self._transition(request_id, ApprovalStatus.CANCELLED, _utcnow())
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        approvals_logger.info("Approval request cancelled", request_id=request_id, requester_id=requester_id)
        self.events.emit(APPROVAL_CANCELLED, {
            "request_id": request_id,
            "post_id": post_id,
            "actor_id": requester_id,
            "status": ApprovalStatus.CANCELLED.value,
        })
        return self.get(request_id)

    @timed(approvals_logger)
    def add_comment(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> ApprovalAction:
        """Attach a comment in any status. A blank comment is stored as the placeholder text."""
        status = self.requests.current_status(request_id)
        if status is None:
            not_found("Approval request", request_id)
        if comment is None or not comment.strip():
            comment = self.settings.no_comment_placeholder

        try:
            action = self.requests.add_action(request_id, approver_id, ApprovalActionType.COMMENT, comment, _utcnow())
            action_id = action.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        approvals_logger.info("Approval comment added", request_id=request_id, approver_id=approver_id)
        self.events.emit(APPROVAL_COMMENTED, {
            "request_id": request_id,
            "action_id": action_id,
            "actor_id": approver_id,
            "status": status,
        })
        return self.requests.get_action(action_id)

    # ============================================================
    # INTERNALS
    # ============================================================

    def _decide(
        self,
        request_id: int,
        approver_id: int,
        comment: Optional[str],
        target: ApprovalStatus,
        action_type: ApprovalActionType,
        event_type: str,
    ) -> ApprovalRequest:
        request = self.get(request_id)
        ensure_transition(request.status, target)
        post_id = request.post_id
        now = _utcnow()

        try:
            self._transition(request_id, target, now)
            self.requests.add_action(request_id, approver_id, action_type, comment, now)
            if target is ApprovalStatus.APPROVED and self.posts.mark_published(post_id, now) is None:
                not_found("Post", post_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        approvals_logger.info(
            f"Approval request {target.value.lower()}",
            request_id=request_id,
            post_id=post_id,
            approver_id=approver_id,
        )
        self.events.emit(event_type, {
            "request_id": request_id,
            "post_id": post_id,
            "actor_id": approver_id,
            "status": target.value,
        })
        return self.get(request_id)

    def _transition(self, request_id: int, target: ApprovalStatus, now: datetime) -> None:
        """Compare-and-set PENDING -> target, or raise ConflictError with the status that won."""
        if self.requests.compare_and_set_status(request_id, ApprovalStatus.PENDING, target, now):
            return
        current = self.requests.current_status(request_id)
        if current is None:
            not_found("Approval request", request_id)
        approvals_logger.warning(
            "Approval transition lost race",
            request_id=request_id,
            target=target.value,
            current=current,
        )
        ensure_transition(current, target)
        raise ConflictError(
            "Approval request was modified concurrently",
            {"status": current, "target": target.value},
        )

    @staticmethod
    def _already_requested(existing: ApprovalRequest) -> ConflictError:
        return ConflictError(
            f"Post already has an approval request (status: {existing.status})",
            {"status": existing.status, "request_id": existing.id},
        )
