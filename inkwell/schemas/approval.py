from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from ..models.approval import ApprovalActionType, ApprovalStatus


class ApprovalRequestCreate(BaseModel):
    post_id: int
    request_message: Optional[str] = None


class ApprovalDecision(BaseModel):
    comment: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None

    class Config:
        from_attributes = True


class PostSummary(BaseModel):
    id: int
    title: str
    slug: str
    status: str
    published: bool
    published_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApprovalActionResponse(BaseModel):
    id: int
    request_id: int
    approver_id: int
    approver: UserSummary
    action_type: ApprovalActionType
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ApprovalRequestSummary(BaseModel):
    id: int
    post_id: int
    post: PostSummary
    requester_id: int
    requester: UserSummary
    status: ApprovalStatus
    request_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApprovalRequestResponse(ApprovalRequestSummary):
    actions: List[ApprovalActionResponse] = []


class ApprovalActionDetail(ApprovalActionResponse):
    """A single action returned with the request it belongs to."""
    request: ApprovalRequestSummary
