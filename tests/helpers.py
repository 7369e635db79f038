"""
helpers.py - Constants and expected-value helpers shared by the test suite
"""

from rebase_ledger import RebaseLedger, PRECISION_FACTOR


# Rates used throughout the tests (per second, scaled by PRECISION_FACTOR)
R0 = 5 * 10 ** 10
R1 = 4 * 10 ** 10
R2 = 2 * 10 ** 10

DAY = 86_400


def expected_interest(principal: int, rate: int, elapsed: int) -> int:
    """Simple interest with truncation, as the accrual engine defines it."""
    return principal * rate * elapsed // PRECISION_FACTOR


def display_total(ledger: RebaseLedger, holders) -> int:
    """Sum of display balances over holders."""
    return sum(ledger.balance_of(h) for h in holders)
