"""
Approvals routes for the post publication workflow.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from ..auth import get_required_user, require_approver
from ..deps import get_approval_service
from ..models.user import User
from ..schemas.approval import (
    ApprovalActionDetail,
    ApprovalDecision,
    ApprovalRequestCreate,
    ApprovalRequestResponse,
)
from ..services.approvals import ApprovalService

router = APIRouter(prefix="/api/approvals", tags=["approvals"])


@router.get("/pending", response_model=List[ApprovalRequestResponse], name="pendingApprovalRequests")
def get_pending_requests(
    service: ApprovalService = Depends(get_approval_service),
    approver: User = Depends(require_approver),
):
    """Review queue: pending requests, oldest first."""
    return service.list_pending()


@router.get("/mine", response_model=List[ApprovalRequestResponse], name="myApprovalRequests")
def get_my_requests(
    service: ApprovalService = Depends(get_approval_service),
    current_user: User = Depends(get_required_user),
):
    """All requests submitted by the current user, newest first."""
    return service.list_by_requester(current_user.id)


@router.get("/by-post/{post_id}", response_model=Optional[ApprovalRequestResponse], name="approvalRequestByContent")
def get_request_by_post(
    post_id: int,
    service: ApprovalService = Depends(get_approval_service),
    current_user: User = Depends(get_required_user),
):
    """The approval request for a post, or null if it was never submitted."""
    return service.get_by_post_id(post_id)


@router.get("/{request_id}", response_model=ApprovalRequestResponse, name="approvalRequest")
def get_request(
    request_id: int,
    service: ApprovalService = Depends(get_approval_service),
    current_user: User = Depends(get_required_user),
):
    """Get a single approval request with its action log."""
    return service.get(request_id)


@router.post("", response_model=ApprovalRequestResponse, status_code=201, name="createApprovalRequest")
def create_request(
    data: ApprovalRequestCreate,
    service: ApprovalService = Depends(get_approval_service),
    current_user: User = Depends(get_required_user),
):
    """Submit one of the current user's posts for review."""
    return service.create_request(data.post_id, current_user.id, data.request_message)


@router.post("/{request_id}/approve", response_model=ApprovalRequestResponse, name="approveRequest")
def approve_request(
    request_id: int,
    decision: Optional[ApprovalDecision] = None,
    service: ApprovalService = Depends(get_approval_service),
    approver: User = Depends(require_approver),
):
    """Approve a pending request; the post is published."""
    comment = decision.comment if decision else None
    return service.approve(request_id, approver.id, comment)


@router.post("/{request_id}/reject", response_model=ApprovalRequestResponse, name="rejectRequest")
def reject_request(
    request_id: int,
    decision: Optional[ApprovalDecision] = None,
    service: ApprovalService = Depends(get_approval_service),
    approver: User = Depends(require_approver),
):
    """Reject a pending request."""
    comment = decision.comment if decision else None
    return service.reject(request_id, approver.id, comment)


@router.post("/{request_id}/cancel", response_model=ApprovalRequestResponse, name="cancelApprovalRequest")
def cancel_request(
    request_id: int,
    service: ApprovalService = Depends(get_approval_service),
    current_user: User = Depends(get_required_user),
):
    """Withdraw a pending request (original requester only)."""
    return service.cancel(request_id, current_user.id)


@router.post(
    "/{request_id}/comments",
    response_model=ApprovalActionDetail,
    status_code=201,
    name="addApprovalComment",
)
def add_comment(
    request_id: int,
    decision: Optional[ApprovalDecision] = None,
    service: ApprovalService = Depends(get_approval_service),
    approver: User = Depends(require_approver),
):
    """Attach a reviewer comment without changing the request status."""
    comment = decision.comment if decision else None
    return service.add_comment(request_id, approver.id, comment)
