from .approvals import ApprovalRepository
from .posts import PostRepository

__all__ = ["ApprovalRepository", "PostRepository"]
