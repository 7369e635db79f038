"""
accrual.py - Pure interest accrual calculations

PURE FUNCTIONS - all inputs explicit, no ledger access, no hidden state.

Key Formula (simple, non-compounding interest):
    accrued_balance  = raw_balance * (PRECISION_FACTOR + rate * elapsed) // PRECISION_FACTOR
    accrued_interest = accrued_balance - raw_balance

where rate is a per-second rate scaled by PRECISION_FACTOR and elapsed is the
number of seconds since the holder was last settled. Python ints are
unbounded, so the intermediate product cannot overflow.
"""

from __future__ import annotations
from typing import Optional

from .core import PRECISION_FACTOR, validate_amount


def elapsed_time(last_settled: Optional[int], now: int) -> int:
    """
    Seconds of accrual owed between the last settlement and now.

    A holder who has never been settled has nothing to catch up on, so
    None yields 0 rather than the time since the clock epoch. A last
    settlement in the future (impossible under a monotonic clock) is
    clamped to 0.
    """
    if last_settled is None:
        return 0
    return max(0, now - last_settled)


def accrued_balance(raw_balance: int, holder_rate: int, elapsed: int) -> int:
    """
    Raw balance grown by linear interest over the elapsed time.

    Args:
        raw_balance: Un-accrued balance
        holder_rate: Holder's frozen per-second rate, scaled by PRECISION_FACTOR
        elapsed: Seconds since last settlement

    Returns:
        Balance including accrued interest, truncated toward zero
    """
    validate_amount(raw_balance, "raw_balance")
    validate_amount(holder_rate, "holder_rate")
    validate_amount(elapsed, "elapsed")
    if raw_balance == 0 or holder_rate == 0 or elapsed == 0:
        return raw_balance
    return raw_balance * (PRECISION_FACTOR + holder_rate * elapsed) // PRECISION_FACTOR


def accrued_interest(raw_balance: int, holder_rate: int, elapsed: int) -> int:
    """Interest owed on raw_balance over the elapsed time (never negative)."""
    return accrued_balance(raw_balance, holder_rate, elapsed) - raw_balance


def interest_since(
    raw_balance: int,
    holder_rate: int,
    last_settled: Optional[int],
    now: int,
) -> int:
    """Convenience wrapper: interest owed from last_settled up to now."""
    return accrued_interest(raw_balance, holder_rate, elapsed_time(last_settled, now))
