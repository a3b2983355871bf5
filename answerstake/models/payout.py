"""Payout models."""

from enum import Enum
from pydantic import BaseModel
from typing import List, Optional


class PayoutReason(str, Enum):
    """Why tokens left the ledger."""
    UPVOTE = "upvote"
    CORRECT_ANSWER = "correct_answer"


class Payout(BaseModel):
    """A transfer to an answer author's external balance."""
    account_id: str
    amount: int
    reason: PayoutReason
    question_id: int
    answer_id: Optional[int] = None


class PayoutSummary(BaseModel):
    account_id: str
    total_credited: int
    payouts: List[Payout]
