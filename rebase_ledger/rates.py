"""
rates.py - Global and per-holder interest rates

RateRegistry owns the global rate (guarded by a RatePolicy) and, through the
shared HolderAccount records, each holder's frozen rate and last settlement
time.
"""

from __future__ import annotations
from typing import Optional

from .core import (
    Accounts, HolderAccount, RatePolicy,
    RateIncreaseRejected, RateDecreaseRejected,
    validate_amount, validate_holder,
)


class RateRegistry:
    """
    Global rate plus per-holder frozen rates and settlement timestamps.

    Example:
        registry = RateRegistry(accounts, initial_rate=5 * 10**10)
        registry.freeze_holder_rate("alice", registry.global_rate)
        registry.set_global_rate(4 * 10**10)
        registry.get_holder_rate("alice")  # still 5 * 10**10
    """

    def __init__(
        self,
        accounts: Accounts,
        initial_rate: int,
        policy: RatePolicy = RatePolicy.DECREASE_ONLY,
    ):
        self.accounts = accounts
        self.policy = policy
        self._global_rate = validate_amount(initial_rate, "initial_rate")

    def _account(self, holder: str) -> HolderAccount:
        account = self.accounts.get(holder)
        if account is None:
            account = HolderAccount()
            self.accounts[holder] = account
        return account

    # ========================================================================
    # GLOBAL RATE
    # ========================================================================

    @property
    def global_rate(self) -> int:
        return self._global_rate

    def get_global_rate(self) -> int:
        return self._global_rate

    def check_global_rate(self, new_rate: int) -> None:
        """
        Raise if new_rate is not allowed by the policy. Equal rates always pass.

        Raises:
            RateIncreaseRejected: new_rate > current under DECREASE_ONLY
            RateDecreaseRejected: new_rate < current under INCREASE_ONLY
        """
        validate_amount(new_rate, "new_rate")
        old_rate = self._global_rate
        if self.policy is RatePolicy.DECREASE_ONLY and new_rate > old_rate:
            raise RateIncreaseRejected(old_rate, new_rate)
        if self.policy is RatePolicy.INCREASE_ONLY and new_rate < old_rate:
            raise RateDecreaseRejected(old_rate, new_rate)

    def set_global_rate(self, new_rate: int) -> int:
        """Set the global rate after a policy check. Returns the old rate."""
        self.check_global_rate(new_rate)
        old_rate = self._global_rate
        self._global_rate = new_rate
        return old_rate

    # ========================================================================
    # HOLDER RATES
    # ========================================================================

    def get_holder_rate(self, holder: str) -> int:
        """Frozen rate for holder, 0 if the holder was never seeded."""
        account = self.accounts.get(holder)
        if account is None or account.rate is None:
            return 0
        return account.rate

    def is_seeded(self, holder: str) -> bool:
        account = self.accounts.get(holder)
        return account is not None and account.is_seeded

    def freeze_holder_rate(self, holder: str, rate: int) -> None:
        validate_holder(holder)
        validate_amount(rate, "rate")
        self._account(holder).rate = rate

    # ========================================================================
    # SETTLEMENT TIMESTAMPS
    # ========================================================================

    def last_settled(self, holder: str) -> Optional[int]:
        account = self.accounts.get(holder)
        return account.last_settled if account is not None else None

    def mark_settled(self, holder: str, now: int) -> None:
        validate_holder(holder)
        self._account(holder).last_settled = now
