from .approval import (
    ApprovalRequestCreate,
    ApprovalDecision,
    ApprovalRequestResponse,
    ApprovalActionResponse,
    ApprovalActionDetail,
)
from .auth import UserCreate, UserLogin, UserResponse, TokenResponse, RefreshRequest
from .posts import PostCreate, PostUpdate, PostResponse

__all__ = [
    "ApprovalRequestCreate", "ApprovalDecision", "ApprovalRequestResponse",
    "ApprovalActionResponse", "ApprovalActionDetail",
    "UserCreate", "UserLogin", "UserResponse", "TokenResponse", "RefreshRequest",
    "PostCreate", "PostUpdate", "PostResponse",
]
