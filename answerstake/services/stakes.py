"""Stake accounting for deposits held on behalf of question authors."""

from typing import Dict

from answerstake.errors import InvariantViolation


class StakeBook:
    """View over the ledger's ``account_id -> amount`` stake mapping.

    Operates on the mapping in place so the ledger state stays the single
    owner of the numbers.
    """

    def __init__(self, stakes: Dict[str, int]):
        self._stakes = stakes

    def balance_of(self, account_id: str) -> int:
        return self._stakes.get(account_id, 0)

    def total(self) -> int:
        return sum(self._stakes.values())

    def deposit(self, account_id: str, amount: int) -> int:
        """Add ``amount`` to the account's stake, creating the entry if absent."""
        if amount < 0:
            raise InvariantViolation(f"Cannot deposit negative amount {amount}")
        self._stakes[account_id] = self._stakes.get(account_id, 0) + amount
        return self._stakes[account_id]

    def can_cover(self, account_id: str, amount: int) -> bool:
        return account_id in self._stakes and self._stakes[account_id] >= amount

    def withdraw(self, account_id: str, amount: int) -> int:
        """Take ``amount`` out of custody. The stake never goes negative."""
        if account_id not in self._stakes:
            raise InvariantViolation(f"Stake holder {account_id} has no deposit")
        if self._stakes[account_id] < amount:
            raise InvariantViolation(
                f"Stake holder {account_id} has not enough deposit: "
                f"{self._stakes[account_id]} < {amount}"
            )
        self._stakes[account_id] -= amount
        return self._stakes[account_id]
