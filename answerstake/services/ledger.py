"""Question/answer escrow ledger.

The ledger owns stakes, questions and answers. Every mutating call checks all
of its preconditions before touching state, so a rejected call leaves the
ledger exactly as it found it.

Reward flow:
1. ``create_question`` escrows the attached deposit as the question reward
2. ``upvote_answer`` forwards a fixed micropayment straight to the answer author
3. ``set_correct_answer`` releases the whole escrowed reward to one answer
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from answerstake.errors import (
    AlreadyResolved,
    AnswerNotFound,
    InsufficientDeposit,
    InvariantViolation,
    LedgerError,
    QuestionNotFound,
    SelfRewardForbidden,
    Unauthorized,
    WrongAttachedAmount,
)
from answerstake.logging_config import StructuredLogger
from answerstake.models.answer import Answer
from answerstake.models.ledger import LedgerState
from answerstake.models.payout import PayoutReason
from answerstake.models.question import Question, QuestionView
from answerstake.services.payouts import PayoutBook
from answerstake.services.stakes import StakeBook

logger = StructuredLogger(__name__)

MIN_QUESTION_REWARD = 10
ANSWER_PRICE = 1
UPVOTE_PRICE = 1


@dataclass
class InvariantResult:
    name: str
    passed: bool
    detail: Optional[str] = None


class Ledger:
    """Aggregate root for stakes, questions and answers."""

    def __init__(
        self,
        state: Optional[LedgerState] = None,
        payouts: Optional[PayoutBook] = None,
        min_question_reward: int = MIN_QUESTION_REWARD,
        answer_price: int = ANSWER_PRICE,
        upvote_price: int = UPVOTE_PRICE,
    ):
        self._state = state if state is not None else LedgerState()
        self.payouts = payouts if payouts is not None else PayoutBook()
        self.min_question_reward = min_question_reward
        self.answer_price = answer_price
        self.upvote_price = upvote_price

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def stakes(self) -> StakeBook:
        return StakeBook(self._state.stakes)

    def snapshot(self) -> LedgerState:
        """Deep copy of the current state, safe to persist or restore later."""
        return self._state.model_copy(deep=True)

    def restore(self, state: LedgerState):
        self._state = state

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def create_question(
        self,
        content: str,
        caller_id: str,
        attached_amount: int,
        declared_reward: Optional[int] = None,
    ) -> int:
        """Escrow the attached deposit as a new question's reward."""
        if attached_amount < self.min_question_reward:
            raise self._reject(
                "create_question",
                InsufficientDeposit(
                    f"Min question reward is {self.min_question_reward}, "
                    f"attached {attached_amount}"
                ),
                caller_id=caller_id,
            )
        if declared_reward is not None and declared_reward > attached_amount:
            raise self._reject(
                "create_question",
                InsufficientDeposit(
                    f"Declared reward {declared_reward} exceeds attached "
                    f"deposit {attached_amount}"
                ),
                caller_id=caller_id,
            )

        question_id = self._state.next_question_id
        self._state.questions[question_id] = Question(
            content=content,
            reward=attached_amount,
            author_account_id=caller_id,
        )
        self._state.next_question_id = question_id + 1
        self.stakes.deposit(caller_id, attached_amount)

        logger.info(
            "question created",
            question_id=question_id,
            author=caller_id,
            reward=attached_amount,
        )
        return question_id

    def create_answer(
        self,
        question_id: int,
        content: str,
        caller_id: str,
        attached_amount: int,
    ) -> int:
        """Append an answer. The fee is consumed, not escrowed."""
        question = self._question_or_reject("create_answer", question_id, caller_id)
        if attached_amount != self.answer_price:
            raise self._reject(
                "create_answer",
                WrongAttachedAmount(
                    f"To answer a question you have to pay exactly "
                    f"{self.answer_price}, attached {attached_amount}"
                ),
                caller_id=caller_id,
                question_id=question_id,
            )

        answer_id = question.next_answer_id
        question.answers.append(
            Answer(id=answer_id, content=content, account_id=caller_id)
        )
        question.next_answer_id = answer_id + 1

        logger.info(
            "answer created",
            question_id=question_id,
            answer_id=answer_id,
            author=caller_id,
        )
        return answer_id

    def upvote_answer(
        self,
        question_id: int,
        answer_id: int,
        caller_id: str,
        attached_amount: int,
    ) -> None:
        """Forward the upvote payment to the answer author and tally it."""
        if attached_amount != self.upvote_price:
            raise self._reject(
                "upvote_answer",
                WrongAttachedAmount(
                    f"To upvote an answer you have to pay exactly "
                    f"{self.upvote_price}, attached {attached_amount}"
                ),
                caller_id=caller_id,
                question_id=question_id,
            )
        question = self._question_or_reject("upvote_answer", question_id, caller_id)
        answer = self._answer_or_reject(
            "upvote_answer", question, question_id, answer_id, caller_id
        )

        answer.reward += attached_amount
        self.payouts.transfer(
            answer.account_id,
            attached_amount,
            PayoutReason.UPVOTE,
            question_id,
            answer_id,
        )

        logger.info(
            "answer upvoted",
            question_id=question_id,
            answer_id=answer_id,
            voter=caller_id,
            recipient=answer.account_id,
            amount=attached_amount,
        )

    def set_correct_answer(
        self,
        question_id: int,
        answer_id: int,
        caller_id: str,
    ) -> None:
        """Release the question's full reward to the chosen answer, once."""
        op = "set_correct_answer"
        question = self._question_or_reject(op, question_id, caller_id)
        if question.author_account_id != caller_id:
            raise self._reject(
                op,
                Unauthorized(
                    "Signer is not an author of the question and must not "
                    "select what answer is correct"
                ),
                caller_id=caller_id,
                question_id=question_id,
            )
        answer = self._answer_or_reject(op, question, question_id, answer_id, caller_id)
        if answer.account_id == caller_id:
            raise self._reject(
                op,
                SelfRewardForbidden(
                    "Question author is not allowed to mark own answer as correct"
                ),
                caller_id=caller_id,
                question_id=question_id,
                answer_id=answer_id,
            )
        if question.is_resolved:
            raise self._reject(
                op,
                AlreadyResolved(
                    f"Correct answer for question {question_id} has been "
                    f"selected already"
                ),
                caller_id=caller_id,
                question_id=question_id,
                answer_id=answer_id,
            )

        reward = question.reward
        stakes = self.stakes
        if not stakes.can_cover(question.author_account_id, reward):
            error = InvariantViolation(
                f"Stake of {question.author_account_id} "
                f"({stakes.balance_of(question.author_account_id)}) cannot "
                f"cover reward {reward} of question {question_id}"
            )
            logger.error(
                "stake backing broken",
                question_id=question_id,
                author=question.author_account_id,
                reward=reward,
            )
            raise error

        answer.is_correct = True
        answer.reward += reward
        stakes.withdraw(question.author_account_id, reward)
        question.reward = 0
        self.payouts.transfer(
            answer.account_id,
            reward,
            PayoutReason.CORRECT_ANSWER,
            question_id,
            answer_id,
        )

        logger.info(
            "correct answer selected",
            question_id=question_id,
            answer_id=answer_id,
            recipient=answer.account_id,
            amount=reward,
        )

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    def list_questions(self) -> Dict[str, QuestionView]:
        """Full snapshot of every question keyed by stringified id."""
        return {
            str(question_id): QuestionView.from_question(question)
            for question_id, question in self._state.questions.items()
        }

    def get_question(self, question_id: int) -> QuestionView:
        question = self._state.questions.get(question_id)
        if question is None:
            raise QuestionNotFound(question_id)
        return QuestionView.from_question(question)

    def get_answer(self, question_id: int, answer_id: int) -> Answer:
        question = self._state.questions.get(question_id)
        if question is None:
            raise QuestionNotFound(question_id)
        answer = question.find_answer(answer_id)
        if answer is None:
            raise AnswerNotFound(question_id, answer_id)
        return answer.model_copy()

    def list_stakes(self) -> Dict[str, int]:
        return dict(self._state.stakes)

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def check_invariants(self) -> List[InvariantResult]:
        """Run every bookkeeping check against the current state. No mutations."""
        return [
            self._check_stake_backing(),
            self._check_non_negative(),
            self._check_single_correct(),
            self._check_answer_ids(),
            self._check_question_ids(),
        ]

    def assert_invariants(self):
        for result in self.check_invariants():
            if not result.passed:
                logger.error(
                    "invariant failed", invariant=result.name, detail=result.detail
                )
                raise InvariantViolation(f"{result.name}: {result.detail}")

    def _check_stake_backing(self) -> InvariantResult:
        outstanding: Dict[str, int] = {}
        for question in self._state.questions.values():
            if not question.is_resolved:
                author = question.author_account_id
                outstanding[author] = outstanding.get(author, 0) + question.reward

        violations = []
        for account_id in set(outstanding) | set(self._state.stakes):
            staked = self._state.stakes.get(account_id, 0)
            owed = outstanding.get(account_id, 0)
            if staked != owed:
                violations.append(f"{account_id}: stake={staked} owed={owed}")

        if violations:
            return InvariantResult(
                name="stake_backing",
                passed=False,
                detail=f"Violations: {'; '.join(sorted(violations))}",
            )
        return InvariantResult(name="stake_backing", passed=True)

    def _check_non_negative(self) -> InvariantResult:
        violations = [
            f"stake {account_id}={amount}"
            for account_id, amount in self._state.stakes.items()
            if amount < 0
        ]
        for question_id, question in self._state.questions.items():
            if question.reward < 0:
                violations.append(f"question {question_id} reward={question.reward}")
            for answer in question.answers:
                if answer.reward < 0:
                    violations.append(
                        f"answer {question_id}/{answer.id} reward={answer.reward}"
                    )

        if violations:
            return InvariantResult(
                name="no_negative_values",
                passed=False,
                detail=f"Violations: {'; '.join(violations)}",
            )
        return InvariantResult(name="no_negative_values", passed=True)

    def _check_single_correct(self) -> InvariantResult:
        violations = []
        for question_id, question in self._state.questions.items():
            correct = [a.id for a in question.answers if a.is_correct]
            if len(correct) > 1:
                violations.append(f"question {question_id}: answers {correct}")
            elif correct and question.reward != 0:
                violations.append(
                    f"question {question_id}: resolved with reward {question.reward}"
                )

        if violations:
            return InvariantResult(
                name="single_correct_answer",
                passed=False,
                detail=f"Violations: {'; '.join(violations)}",
            )
        return InvariantResult(name="single_correct_answer", passed=True)

    def _check_answer_ids(self) -> InvariantResult:
        violations = []
        for question_id, question in self._state.questions.items():
            ids = [a.id for a in question.answers]
            if ids != sorted(set(ids)) or any(i < 1 for i in ids):
                violations.append(f"question {question_id}: ids {ids}")
            elif ids and question.next_answer_id <= ids[-1]:
                violations.append(
                    f"question {question_id}: next id {question.next_answer_id} "
                    f"<= last id {ids[-1]}"
                )

        if violations:
            return InvariantResult(
                name="answer_ids_sequential",
                passed=False,
                detail=f"Violations: {'; '.join(violations)}",
            )
        return InvariantResult(name="answer_ids_sequential", passed=True)

    def _check_question_ids(self) -> InvariantResult:
        ids = list(self._state.questions)
        if ids and (min(ids) < 1 or self._state.next_question_id <= max(ids)):
            return InvariantResult(
                name="question_ids_allocated",
                passed=False,
                detail=(
                    f"next id {self._state.next_question_id} does not exceed "
                    f"allocated ids {ids}"
                ),
            )
        return InvariantResult(name="question_ids_allocated", passed=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _question_or_reject(self, op: str, question_id: int, caller_id: str) -> Question:
        question = self._state.questions.get(question_id)
        if question is None:
            raise self._reject(
                op, QuestionNotFound(question_id), caller_id=caller_id
            )
        return question

    def _answer_or_reject(
        self,
        op: str,
        question: Question,
        question_id: int,
        answer_id: int,
        caller_id: str,
    ) -> Answer:
        answer = question.find_answer(answer_id)
        if answer is None:
            raise self._reject(
                op,
                AnswerNotFound(question_id, answer_id),
                caller_id=caller_id,
            )
        return answer

    def _reject(self, op: str, error: LedgerError, **fields) -> LedgerError:
        logger.warning(
            "call rejected", operation=op, error=error.kind, detail=error.detail, **fields
        )
        return error
