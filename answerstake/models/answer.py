"""Answer models."""

from pydantic import BaseModel


class AnswerCreate(BaseModel):
    """Payload to submit an answer."""
    content: str


class Answer(BaseModel):
    """Answer to a question, also the listing view of an answer."""
    id: int
    content: str
    account_id: str
    reward: int = 0  # Running total of everything paid to the author
    is_correct: bool = False

    class Config:
        from_attributes = True


class AnswerCreated(BaseModel):
    question_id: int
    answer_id: int
