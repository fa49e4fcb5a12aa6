from sqlmodel import SQLModel
from typing import Optional
from enum import Enum

class WizardStep(str, Enum):
    AWAITING_TARGET = "awaiting_target"
    AWAITING_COMMENT = "awaiting_comment"
    AWAITING_CONFIRMATION = "awaiting_confirmation"

class WizardState(SQLModel):
    """Progress of one initiator through the add-friend dialogue."""

    sender_id: int
    step: WizardStep = WizardStep.AWAITING_TARGET
    receiver_id: Optional[int] = None
    comment: str = ""
    # sender-facing message offering the send/abort controls
    sender_anchor_message_id: Optional[int] = None
