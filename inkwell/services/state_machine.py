from ..models.approval import ApprovalStatus
from ..responses import ConflictError

ALLOWED_TRANSITIONS = {
    ApprovalStatus.PENDING: [ApprovalStatus.APPROVED, ApprovalStatus.REJECTED, ApprovalStatus.CANCELLED],
    ApprovalStatus.APPROVED: [],
    ApprovalStatus.REJECTED: [],
    ApprovalStatus.CANCELLED: [],
}


def ensure_transition(current: str, target: ApprovalStatus) -> None:
    current_status = ApprovalStatus(current)
    if target not in ALLOWED_TRANSITIONS[current_status]:
        raise ConflictError(
            f"Approval request status is {current_status.value}, cannot move to {target.value}",
            {"status": current_status.value, "target": target.value},
        )
