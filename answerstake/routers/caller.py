"""Trusted per-call facts supplied by the host: who is calling and what they attached."""

from fastapi import Depends, Header, HTTPException, Request
from typing import Optional

from answerstake.services.dispatcher import LedgerDispatcher


async def get_caller_id(x_caller_id: Optional[str] = Header(None)) -> str:
    """Extract the caller's account id from the ``X-Caller-Id`` header."""
    if not x_caller_id or not x_caller_id.strip():
        raise HTTPException(status_code=401, detail="X-Caller-Id header required")
    return x_caller_id.strip()


async def get_attached_amount(x_attached_amount: int = Header(0, ge=0)) -> int:
    """Amount of tokens attached to the call, in the smallest unit."""
    return x_attached_amount


def get_dispatcher(request: Request) -> LedgerDispatcher:
    """Ledger dispatcher owned by the running application."""
    return request.app.state.dispatcher


class CallContext:
    """Caller id and attached amount bundled for mutating endpoints."""

    def __init__(
        self,
        caller_id: str = Depends(get_caller_id),
        attached_amount: int = Depends(get_attached_amount),
    ):
        self.caller_id = caller_id
        self.attached_amount = attached_amount
