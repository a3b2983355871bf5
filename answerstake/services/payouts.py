"""Payout sink standing in for the host's token transfers."""

from typing import Dict, List, Optional, Tuple

from answerstake.logging_config import StructuredLogger
from answerstake.models.payout import Payout, PayoutReason, PayoutSummary

logger = StructuredLogger(__name__)


class PayoutBook:
    """Records every transfer the ledger makes to an answer author."""

    def __init__(self):
        self._history: List[Payout] = []
        self._credited: Dict[str, int] = {}

    def transfer(
        self,
        account_id: str,
        amount: int,
        reason: PayoutReason,
        question_id: int,
        answer_id: Optional[int] = None,
    ) -> Payout:
        payout = Payout(
            account_id=account_id,
            amount=amount,
            reason=reason,
            question_id=question_id,
            answer_id=answer_id,
        )
        self._history.append(payout)
        self._credited[account_id] = self._credited.get(account_id, 0) + amount
        logger.debug(
            "payout recorded",
            account_id=account_id,
            amount=amount,
            reason=reason.value,
            question_id=question_id,
            answer_id=answer_id,
        )
        return payout

    def balance_of(self, account_id: str) -> int:
        return self._credited.get(account_id, 0)

    def history(self, account_id: Optional[str] = None) -> List[Payout]:
        if account_id is None:
            return list(self._history)
        return [p for p in self._history if p.account_id == account_id]

    def summary(self, account_id: str) -> PayoutSummary:
        return PayoutSummary(
            account_id=account_id,
            total_credited=self.balance_of(account_id),
            payouts=self.history(account_id),
        )

    def snapshot(self) -> Tuple[List[Payout], Dict[str, int]]:
        return list(self._history), dict(self._credited)

    def restore(self, snapshot: Tuple[List[Payout], Dict[str, int]]):
        history, credited = snapshot
        self._history = list(history)
        self._credited = dict(credited)
