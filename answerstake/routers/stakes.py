"""Stakes and payouts router."""

from fastapi import APIRouter, Depends
from typing import Dict

from answerstake.models.ledger import StakeInfo
from answerstake.models.payout import PayoutSummary
from answerstake.routers.caller import get_dispatcher
from answerstake.services.dispatcher import LedgerDispatcher
from answerstake.services.ledger import Ledger

router = APIRouter(tags=["Stakes"])


@router.get("/stakes", response_model=Dict[str, int])
async def list_stakes(dispatcher: LedgerDispatcher = Depends(get_dispatcher)):
    """Deposits currently held, per account."""
    return dispatcher.read(Ledger.list_stakes)


@router.get("/stakes/{account_id}", response_model=StakeInfo)
async def get_stake(
    account_id: str,
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    amount = dispatcher.read(lambda ledger: ledger.stakes.balance_of(account_id))
    return StakeInfo(account_id=account_id, amount=amount)


@router.get("/payouts/{account_id}", response_model=PayoutSummary)
async def get_payouts(
    account_id: str,
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Tokens credited to an account through upvotes and correct answers."""
    return dispatcher.read(lambda ledger: ledger.payouts.summary(account_id))
