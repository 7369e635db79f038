"""
Frozen Rate Conformance Tests

INVARIANT: A holder's personal rate is set once and then only replaced by
the empty-receiver transfer rule.

    ∀ holder h, operation op:
        rate(h) changes during op ⟹
            (op = mint(h, _) ∧ h was unseeded) ∨
            (op = transfer(s, h, _) ∧ s ≠ h ∧ balance(h) = 0 before op ∧ rate(h) = rate(s))
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from rebase_ledger import RebaseLedger, RateSetter, LedgerError, ALL


AUTHORITY = RateSetter("admin")
HOLDERS = ["alice", "bob", "carol", "dave"]

holder = st.sampled_from(HOLDERS)
amount = st.one_of(st.integers(min_value=0, max_value=2_000_000), st.just(ALL))

operations = st.lists(
    st.one_of(
        st.tuples(st.just("mint"), holder, holder, st.integers(min_value=0, max_value=1_000_000)),
        st.tuples(st.just("burn"), holder, holder, amount),
        st.tuples(st.just("transfer"), holder, holder, amount),
        st.tuples(st.just("rate"), holder, holder, st.integers(min_value=0, max_value=10 ** 11)),
        st.tuples(st.just("wait"), holder, holder, st.integers(min_value=0, max_value=30 * 86_400)),
    ),
    max_size=40,
)


def run(ledger: RebaseLedger, op) -> None:
    kind, a, b, value = op
    try:
        if kind == "mint":
            ledger.mint(a, value)
        elif kind == "burn":
            ledger.burn(a, value)
        elif kind == "transfer":
            ledger.transfer(a, b, value)
        elif kind == "rate":
            ledger.set_interest_rate(value, AUTHORITY)
        else:
            ledger.advance_time(ledger.current_time + value)
    except LedgerError:
        pass


class TestFrozenRateProperties:
    """Property-based frozen-rate tests."""

    @given(operations)
    @settings(max_examples=100)
    def test_rates_change_only_by_seeding_or_empty_receive(self, ops):
        """
        PROPERTY: Every observed rate change is explained by a mint into an
        unseeded holder or a transfer of any amount into an empty holder.
        """
        ledger = RebaseLedger("test", initial_rate=10 ** 11, verbose=False)
        for op in ops:
            seeded = {h: ledger.rates.is_seeded(h) for h in HOLDERS}
            rates = {h: ledger.get_user_interest_rate(h) for h in HOLDERS}
            balances = {h: ledger.balance_of(h) for h in HOLDERS}
            global_rate = ledger.get_interest_rate()

            run(ledger, op)

            kind, a, b, _ = op
            for h in HOLDERS:
                if ledger.get_user_interest_rate(h) == rates[h] and ledger.rates.is_seeded(h) == seeded[h]:
                    continue
                if kind == "mint" and h == a:
                    assert not seeded[h]
                    assert ledger.get_user_interest_rate(h) == global_rate
                else:
                    assert kind == "transfer" and h == b and h != a
                    assert balances[h] == 0
                    assert ledger.get_user_interest_rate(h) == rates[a]

    @given(operations)
    @settings(max_examples=50)
    def test_frozen_rate_never_exceeds_initial_rate(self, ops):
        """
        PROPERTY: Under DECREASE_ONLY no holder ever earns more than the
        ledger's opening rate.
        """
        initial = 10 ** 11
        ledger = RebaseLedger("test", initial_rate=initial, verbose=False)
        for op in ops:
            run(ledger, op)
        for h in HOLDERS:
            assert ledger.get_user_interest_rate(h) <= initial

    @given(operations)
    @settings(max_examples=50)
    def test_empty_receiver_always_takes_sender_rate(self, ops):
        """
        PROPERTY: After any applied transfer into an empty holder, including a
        zero-amount one, the receiver's rate equals the sender's.
        """
        ledger = RebaseLedger("test", initial_rate=10 ** 11, verbose=False)
        for op in ops:
            kind, a, b, value = op
            empty = ledger.balance_of(b) == 0
            events = len(ledger.events)
            run(ledger, op)
            applied = len(ledger.events) > events
            if kind == "transfer" and applied and a != b and empty:
                assert ledger.rates.is_seeded(b)
                assert ledger.get_user_interest_rate(b) == ledger.get_user_interest_rate(a)
