"""
settlement.py - Materializing accrued interest into raw balances

Settling a holder credits the interest accrued since their last settlement
to their raw balance and moves their accrual baseline to now. Settlement is
split into a pure preview (what would be credited) and an apply step, so
that operations can plan every settlement, validate, and only then mutate.

Settlement is idempotent at a fixed timestamp: after settle(h, t), a second
settle(h, t) previews zero elapsed time and credits nothing.
"""

from __future__ import annotations
from dataclasses import dataclass

from .accrual import elapsed_time, accrued_interest
from .rates import RateRegistry
from .token_ledger import TokenLedger


@dataclass(frozen=True, slots=True)
class Settlement:
    """
    A planned (or applied) settlement for one holder.

    Attributes:
        holder: Holder being settled
        timestamp: New accrual baseline
        elapsed: Seconds of accrual covered
        interest: Amount credited to the raw balance
        raw_before: Raw balance before the credit
    """
    holder: str
    timestamp: int
    elapsed: int
    interest: int
    raw_before: int

    @property
    def raw_after(self) -> int:
        return self.raw_before + self.interest


class SettlementCoordinator:
    """Orchestrates "settle holder now" across the token ledger and rate registry."""

    def __init__(self, tokens: TokenLedger, rates: RateRegistry):
        self.tokens = tokens
        self.rates = rates

    def preview(self, holder: str, now: int) -> Settlement:
        """Compute the settlement for holder at now without mutating anything."""
        raw = self.tokens.raw_balance_of(holder)
        elapsed = elapsed_time(self.rates.last_settled(holder), now)
        interest = accrued_interest(raw, self.rates.get_holder_rate(holder), elapsed)
        return Settlement(
            holder=holder,
            timestamp=now,
            elapsed=elapsed,
            interest=interest,
            raw_before=raw,
        )

    def apply(self, settlement: Settlement) -> None:
        """
        Credit the planned interest and move the baseline.

        A holder with no account and nothing to credit is left untouched, so
        zero-amount operations on unknown names create no records.
        """
        if settlement.holder not in self.tokens.accounts and not settlement.raw_after:
            return
        self.tokens.credit(settlement.holder, settlement.interest)
        self.rates.mark_settled(settlement.holder, settlement.timestamp)

    def settle(self, holder: str, now: int) -> Settlement:
        settlement = self.preview(holder, now)
        self.apply(settlement)
        return settlement
