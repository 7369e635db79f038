"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the interest-bearing ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. rate_policy.py - The global rate only moves in the policy's direction
2. frozen_rates.py - Holder rates change only by the empty-receiver rule
3. settlement_idempotency.py - Settling twice at one instant credits once
4. accrual_monotonicity.py - Balances of idle holders never shrink
5. display_conservation.py - Transfers conserve total display balance
6. operation_atomicity.py - Failed operations leave no trace

These tests use hypothesis for property-based testing.
"""
