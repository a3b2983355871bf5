"""Questions router."""

from fastapi import APIRouter, Depends
from typing import Dict

from answerstake.models.question import QuestionCreate, QuestionCreated, QuestionView
from answerstake.routers.caller import CallContext, get_dispatcher
from answerstake.services.dispatcher import LedgerDispatcher
from answerstake.services.ledger import Ledger

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.post("", response_model=QuestionCreated, status_code=201)
async def create_question(
    data: QuestionCreate,
    call: CallContext = Depends(),
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Post a question. The attached deposit becomes its reward."""
    question_id = dispatcher.execute(
        Ledger.create_question,
        data.content,
        call.caller_id,
        call.attached_amount,
        declared_reward=data.reward,
    )
    return QuestionCreated(question_id=question_id)


@router.get("", response_model=Dict[str, QuestionView])
async def list_questions(dispatcher: LedgerDispatcher = Depends(get_dispatcher)):
    """List every question, keyed by id, in creation order."""
    return dispatcher.read(Ledger.list_questions)


@router.get("/{question_id}", response_model=QuestionView)
async def get_question(
    question_id: int,
    dispatcher: LedgerDispatcher = Depends(get_dispatcher),
):
    """Get question details by ID."""
    return dispatcher.read(Ledger.get_question, question_id)
