"""
conftest.py - Shared pytest fixtures for rebase_ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Empty ledgers under either rate policy
- A ledger with funded holders
- A rate-setting capability
- A vault over an empty ledger
"""

import pytest

from rebase_ledger import RebaseLedger, RatePolicy, RateSetter, Vault

from tests.helpers import R0


@pytest.fixture
def authority():
    """Capability issued by the (external) admin check."""
    return RateSetter("admin")


@pytest.fixture
def ledger():
    """Empty ledger at rate R0, time 0."""
    return RebaseLedger("test", initial_rate=R0, verbose=False)


@pytest.fixture
def increase_only_ledger():
    """Empty ledger whose global rate may only go up."""
    return RebaseLedger(
        "test", initial_rate=R0, verbose=False,
        rate_policy=RatePolicy.INCREASE_ONLY,
    )


@pytest.fixture
def funded_ledger():
    """Ledger with alice=1_000_000 and bob=500_000 minted at R0, time 0."""
    ledger = RebaseLedger("test", initial_rate=R0, verbose=False)
    ledger.mint("alice", 1_000_000)
    ledger.mint("bob", 500_000)
    return ledger


@pytest.fixture
def vault(ledger):
    return Vault(ledger)
