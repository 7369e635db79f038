"""
Settlement Idempotency Conformance Tests

INVARIANT: Settling a holder twice at one instant credits interest once.

    ∀ holder h, time t:
        settle(h, t); settle(h, t)  ≡  settle(h, t)

and settlement never changes what balance_of() reports.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from rebase_ledger import RebaseLedger


principals = st.integers(min_value=0, max_value=10 ** 30)
rates = st.integers(min_value=0, max_value=10 ** 12)
waits = st.integers(min_value=0, max_value=10 * 365 * 86_400)


class TestSettlementIdempotencyProperties:
    """Property-based idempotency tests."""

    @given(principals, rates, waits, st.integers(min_value=2, max_value=5))
    @settings(max_examples=100)
    def test_repeated_settlement_credits_once(self, principal, rate, wait, repeats):
        """
        PROPERTY: Settling N times at the same instant equals settling once.
        """
        ledger = RebaseLedger("test", initial_rate=rate, verbose=False)
        ledger.mint("alice", principal)
        ledger.advance_time(wait)

        first = ledger.settle("alice")
        balance = ledger.balance_of("alice")
        principal_after = ledger.principal_balance_of("alice")

        for _ in range(repeats):
            assert ledger.settle("alice") == 0
        assert ledger.balance_of("alice") == balance
        assert ledger.principal_balance_of("alice") == principal_after == principal + first

    @given(principals, rates, waits)
    @settings(max_examples=100)
    def test_settlement_preserves_display_balance(self, principal, rate, wait):
        """
        PROPERTY: Settlement moves value from "accrued" to "raw" without
        creating or destroying any.
        """
        ledger = RebaseLedger("test", initial_rate=rate, verbose=False)
        ledger.mint("alice", principal)
        ledger.advance_time(wait)

        before = ledger.balance_of("alice")
        ledger.settle("alice")
        assert ledger.principal_balance_of("alice") == before
        assert ledger.balance_of("alice") == before

    @given(principals, rates, waits)
    @settings(max_examples=50)
    def test_zero_amount_mint_settles_like_settle(self, principal, rate, wait):
        """
        PROPERTY: Any touching operation settles exactly like settle().
        """
        ledger = RebaseLedger("test", initial_rate=rate, verbose=False)
        ledger.mint("alice", principal)
        ledger.advance_time(wait)

        via_settle = ledger.clone()
        via_settle.settle("alice")
        ledger.mint("alice", 0)
        assert ledger.principal_balance_of("alice") == via_settle.principal_balance_of("alice")
