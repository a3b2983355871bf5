"""Tests for stake accounting (services/stakes.py)."""

import pytest

from answerstake.errors import InvariantViolation
from answerstake.services.stakes import StakeBook


class TestStakeBook:
    def test_deposit_creates_and_accumulates(self):
        stakes = {}
        book = StakeBook(stakes)

        assert book.deposit("alice", 10) == 10
        assert book.deposit("alice", 5) == 15
        assert stakes == {"alice": 15}
        assert book.total() == 15

    def test_unknown_account_has_zero(self):
        assert StakeBook({}).balance_of("nobody") == 0

    def test_withdraw_to_zero_keeps_entry(self):
        stakes = {"alice": 10}
        StakeBook(stakes).withdraw("alice", 10)
        assert stakes == {"alice": 0}

    def test_withdraw_never_goes_negative(self):
        stakes = {"alice": 4}
        book = StakeBook(stakes)

        with pytest.raises(InvariantViolation):
            book.withdraw("alice", 5)
        with pytest.raises(InvariantViolation):
            book.withdraw("bob", 0)
        assert stakes == {"alice": 4}

    def test_can_cover(self):
        book = StakeBook({"alice": 10})
        assert book.can_cover("alice", 10)
        assert not book.can_cover("alice", 11)
        assert not book.can_cover("bob", 0)

    def test_negative_deposit_rejected(self):
        with pytest.raises(InvariantViolation):
            StakeBook({}).deposit("alice", -1)
