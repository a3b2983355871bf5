"""Serialized, commit-or-abort execution of ledger calls."""

import threading
from typing import Any, Callable, TypeVar

from answerstake.database import LedgerStore
from answerstake.errors import LedgerError
from answerstake.logging_config import StructuredLogger
from answerstake.services.ledger import Ledger

logger = StructuredLogger(__name__)

T = TypeVar("T")


class LedgerDispatcher:
    """Owns the ledger and runs one call at a time against it.

    A mutating call is applied, then persisted. If either step raises, the
    ledger and the payout book are put back to their pre-call state.
    """

    def __init__(self, ledger: Ledger, store: LedgerStore):
        self.ledger = ledger
        self.store = store
        self._lock = threading.Lock()

    @classmethod
    def from_store(cls, store: LedgerStore, **ledger_options: Any) -> "LedgerDispatcher":
        """Build a dispatcher around the state the store holds, if any."""
        state = store.load()
        ledger = Ledger(state=state, **ledger_options)
        ledger.assert_invariants()
        logger.info(
            "ledger loaded",
            questions=len(ledger.state.questions),
            stake_total=ledger.stakes.total(),
        )
        return cls(ledger, store)

    def execute(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``operation(ledger, *args, **kwargs)`` as one atomic call."""
        with self._lock:
            state_before = self.ledger.snapshot()
            payouts_before = self.ledger.payouts.snapshot()
            try:
                result = operation(self.ledger, *args, **kwargs)
                self.store.save(self.ledger.state)
            except LedgerError:
                self._rollback(state_before, payouts_before)
                raise
            except Exception as e:
                self._rollback(state_before, payouts_before)
                logger.error(
                    "ledger call aborted",
                    operation=getattr(operation, "__name__", repr(operation)),
                    error=repr(e),
                )
                raise
            return result

    def read(self, query: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        with self._lock:
            return query(self.ledger, *args, **kwargs)

    def _rollback(self, state, payouts):
        self.ledger.restore(state)
        self.ledger.payouts.restore(payouts)
