"""Persisted ledger state."""

from pydantic import BaseModel
from typing import Dict

from answerstake.models.question import Question


class LedgerState(BaseModel):
    """Everything the ledger persists: stakes, questions and the id counter."""
    stakes: Dict[str, int] = {}
    questions: Dict[int, Question] = {}
    next_question_id: int = 1


class StakeInfo(BaseModel):
    account_id: str
    amount: int
