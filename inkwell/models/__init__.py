from .user import User
from .post import Post, PostStatus
from .approval import ApprovalRequest, ApprovalAction, ApprovalStatus, ApprovalActionType

__all__ = [
    "User",
    "Post",
    "PostStatus",
    "ApprovalRequest",
    "ApprovalAction",
    "ApprovalStatus",
    "ApprovalActionType",
]
