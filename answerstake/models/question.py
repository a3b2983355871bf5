"""Question models."""

from pydantic import BaseModel, Field
from typing import Optional, List

from answerstake.models.answer import Answer


class QuestionCreate(BaseModel):
    """Payload to create a new question.

    The attached deposit is the reward. ``reward`` may only restate it or
    name a smaller amount; it never raises the reward above the deposit.
    """
    content: str
    reward: Optional[int] = Field(default=None, ge=0)


class Question(BaseModel):
    """Stored question, including its per-question answer counter."""
    content: str
    reward: int
    author_account_id: str
    answers: List[Answer] = []
    next_answer_id: int = 1

    class Config:
        from_attributes = True

    @property
    def is_resolved(self) -> bool:
        return any(answer.is_correct for answer in self.answers)

    def find_answer(self, answer_id: int) -> Optional[Answer]:
        for answer in self.answers:
            if answer.id == answer_id:
                return answer
        return None


class QuestionView(BaseModel):
    """Question as exposed by the listing."""
    author_account_id: str
    content: str
    reward: int
    answers: List[Answer]

    @classmethod
    def from_question(cls, question: Question) -> "QuestionView":
        return cls(
            author_account_id=question.author_account_id,
            content=question.content,
            reward=question.reward,
            answers=[answer.model_copy() for answer in question.answers],
        )


class QuestionCreated(BaseModel):
    question_id: int
