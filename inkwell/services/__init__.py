from .approvals import ApprovalService

__all__ = ["ApprovalService"]
