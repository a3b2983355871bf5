"""Answers router with upvotes and correct-answer selection."""

from fastapi import APIRouter, Depends

from answerstake.models.answer import Answer, AnswerCreate, AnswerCreated
from answerstake.routers.caller import CallContext, get_dispatcher
from answerstake.services.dispatcher import LedgerDispatcher
from answerstake.services.ledger import Ledger

router = APIRouter(prefix="/questions/{question_id}/answers", tags=["Answers"])


@router.post("", response_model=AnswerCreated, status_code=201)
async def create_answer(
    question_id: int,
    data: AnswerCreate,
    call: CallContext = Depends(),
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Submit an answer. Costs exactly the answer fee."""
    answer_id = dispatcher.execute(
        Ledger.create_answer,
        question_id,
        data.content,
        call.caller_id,
        call.attached_amount,
    )
    return AnswerCreated(question_id=question_id, answer_id=answer_id)


@router.post("/{answer_id}/upvote", response_model=Answer)
async def upvote_answer(
    question_id: int,
    answer_id: int,
    call: CallContext = Depends(),
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Upvote an answer; the payment goes straight to its author."""
    dispatcher.execute(
        Ledger.upvote_answer,
        question_id,
        answer_id,
        call.caller_id,
        call.attached_amount,
    )
    return dispatcher.read(Ledger.get_answer, question_id, answer_id)


@router.post("/{answer_id}/correct", response_model=Answer)
async def set_correct_answer(
    question_id: int,
    answer_id: int,
    call: CallContext = Depends(),
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Mark an answer correct and release the question reward (author only)."""
    dispatcher.execute(
        Ledger.set_correct_answer,
        question_id,
        answer_id,
        call.caller_id,
    )
    return dispatcher.read(Ledger.get_answer, question_id, answer_id)
