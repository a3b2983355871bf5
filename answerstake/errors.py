"""Ledger error taxonomy."""


class LedgerError(Exception):
    """Base class for every rejected ledger call."""

    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def kind(self) -> str:
        return type(self).__name__


class InsufficientDeposit(LedgerError):
    """Attached deposit is below the question minimum or the declared reward."""
    status_code = 402


class WrongAttachedAmount(LedgerError):
    """Answer or upvote call did not attach the exact fee."""
    status_code = 400


class QuestionNotFound(LedgerError):
    status_code = 404

    def __init__(self, question_id: int):
        super().__init__(f"Question with id {question_id} not found")
        self.question_id = question_id


class AnswerNotFound(LedgerError):
    status_code = 404

    def __init__(self, question_id: int, answer_id: int):
        super().__init__(
            f"Answer with id {answer_id} not found in question {question_id}"
        )
        self.question_id = question_id
        self.answer_id = answer_id


class Unauthorized(LedgerError):
    """Correct-answer selection attempted by someone other than the author."""
    status_code = 403


class SelfRewardForbidden(LedgerError):
    """Question author tried to mark their own answer as correct."""
    status_code = 403


class AlreadyResolved(LedgerError):
    """Question already has a correct answer."""
    status_code = 409


class InvariantViolation(LedgerError):
    """Internal bookkeeping fault. Indicates a bug or a corrupt snapshot."""
    status_code = 500
