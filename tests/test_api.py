"""Tests for the HTTP surface (main.py and routers).

Tests cover:
1. Caller headers (X-Caller-Id, X-Attached-Amount)
2. Question, answer, upvote and correct-answer endpoints
3. Ledger error to status code mapping
4. Stakes, payouts and health endpoints
"""

import pytest


def caller(account_id, amount=0):
    """Headers the host supplies for a call."""
    return {"X-Caller-Id": account_id, "X-Attached-Amount": str(amount)}


@pytest.fixture
def answered(client):
    """Question 1 by alice with one answer by bob."""
    client.post("/questions", json={"content": "What is NEAR?"}, headers=caller("alice", 10))
    client.post(
        "/questions/1/answers",
        json={"content": "A blockchain"},
        headers=caller("bob", 1),
    )
    return client


# ============================================================================
# Caller headers
# ============================================================================


class TestCallerHeaders:
    def test_missing_caller_rejected(self, client):
        response = client.post("/questions", json={"content": "q"})
        assert response.status_code == 401

    def test_negative_amount_rejected(self, client):
        response = client.post(
            "/questions", json={"content": "q"}, headers=caller("alice", -5)
        )
        assert response.status_code == 422

    def test_amount_defaults_to_zero(self, client):
        response = client.post(
            "/questions", json={"content": "q"}, headers={"X-Caller-Id": "alice"}
        )
        assert response.status_code == 402
        assert response.json()["error"] == "InsufficientDeposit"


# ============================================================================
# Endpoints
# ============================================================================


class TestQuestions:
    def test_create_and_list(self, client):
        response = client.post(
            "/questions", json={"content": "What is NEAR?"}, headers=caller("alice", 10)
        )
        assert response.status_code == 201
        assert response.json() == {"question_id": 1}

        listing = client.get("/questions").json()
        assert listing == {
            "1": {
                "author_account_id": "alice",
                "content": "What is NEAR?",
                "reward": 10,
                "answers": [],
            }
        }
        assert client.get("/stakes").json() == {"alice": 10}

    def test_declared_reward_above_deposit(self, client):
        response = client.post(
            "/questions",
            json={"content": "q", "reward": 50},
            headers=caller("alice", 10),
        )
        assert response.status_code == 402
        assert client.get("/questions").json() == {}

    def test_get_unknown_question(self, client):
        response = client.get("/questions/42")
        assert response.status_code == 404
        assert response.json()["error"] == "QuestionNotFound"

    def test_listing_is_idempotent(self, answered):
        assert answered.get("/questions").json() == answered.get("/questions").json()


class TestAnswers:
    def test_create_answer(self, answered):
        response = answered.post(
            "/questions/1/answers", json={"content": "Another"}, headers=caller("carol", 1)
        )
        assert response.status_code == 201
        assert response.json() == {"question_id": 1, "answer_id": 2}
        assert answered.get("/stakes").json() == {"alice": 10}

    def test_wrong_fee(self, answered):
        response = answered.post(
            "/questions/1/answers", json={"content": "x"}, headers=caller("carol", 3)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "WrongAttachedAmount"

    def test_upvote_returns_answer(self, answered):
        response = answered.post("/questions/1/answers/1/upvote", headers=caller("carol", 1))

        assert response.status_code == 200
        assert response.json()["reward"] == 1
        payouts = answered.get("/payouts/bob").json()
        assert payouts["total_credited"] == 1
        assert payouts["payouts"][0]["reason"] == "upvote"

    def test_upvote_unknown_answer(self, answered):
        response = answered.post("/questions/1/answers/9/upvote", headers=caller("carol", 1))
        assert response.status_code == 404
        assert response.json()["error"] == "AnswerNotFound"


class TestCorrectAnswer:
    def test_author_releases_reward(self, answered):
        answered.post("/questions/1/answers/1/upvote", headers=caller("carol", 1))

        response = answered.post("/questions/1/answers/1/correct", headers=caller("alice"))

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "content": "A blockchain",
            "account_id": "bob",
            "reward": 11,
            "is_correct": True,
        }
        assert answered.get("/questions/1").json()["reward"] == 0
        assert answered.get("/stakes/alice").json() == {"account_id": "alice", "amount": 0}
        assert answered.get("/payouts/bob").json()["total_credited"] == 11

    def test_second_selection_conflicts(self, answered):
        answered.post("/questions/1/answers/1/correct", headers=caller("alice"))
        before = answered.get("/questions").json()

        response = answered.post("/questions/1/answers/1/correct", headers=caller("alice"))

        assert response.status_code == 409
        assert response.json()["error"] == "AlreadyResolved"
        assert answered.get("/questions").json() == before

    def test_non_author_forbidden(self, answered):
        response = answered.post("/questions/1/answers/1/correct", headers=caller("bob"))
        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized"

    def test_self_reward_forbidden(self, answered):
        answered.post(
            "/questions/1/answers", json={"content": "self answer"}, headers=caller("alice", 1)
        )
        response = answered.post("/questions/1/answers/2/correct", headers=caller("alice"))
        assert response.status_code == 403
        assert response.json()["error"] == "SelfRewardForbidden"


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "healthy"

    def test_health_reports_invariants(self, answered):
        body = answered.get("/health").json()
        assert body["status"] == "healthy"
        assert body["failed_invariants"] == []
        assert body["durable_store"] is False


class TestPersistence:
    def test_mutations_reach_the_store(self, answered, store):
        state = store.load()
        assert state.questions[1].answers[0].account_id == "bob"
        assert state.questions[1].next_answer_id == 2
