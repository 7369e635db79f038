"""
rebase_ledger - Interest-Bearing Token Ledger

A token ledger where every holder freezes a personal interest rate on first
deposit and earns simple interest on their balance from then on.

Usage:
    from rebase_ledger import RebaseLedger, RateSetter, Vault, ALL

    ledger = RebaseLedger("main", initial_rate=5 * 10**10, verbose=False)
    vault = Vault(ledger)

    vault.deposit("alice", 1_000_000)     # alice freezes the current rate
    ledger.advance_time(86_400)
    ledger.balance_of("alice")            # principal + one day of interest

    # Lower the rate for future depositors (alice keeps hers)
    ledger.set_interest_rate(4 * 10**10, RateSetter("admin"))

    ledger.transfer("alice", "bob", 500)  # bob was empty: inherits alice's rate
"""

# Core types
from .core import (
    PRECISION_FACTOR,
    MAX_AMOUNT,
    ALL,
    DEFAULT_INTEREST_RATE,
    RatePolicy,
    EventType,
    HolderAccount,
    LedgerEvent,
    RateSetter,
    RawBalanceProvider,
    LedgerError,
    PolicyViolation,
    RateIncreaseRejected,
    RateDecreaseRejected,
    InsufficientBalance,
    InsufficientAllowance,
    AllowanceExceeded,
    Unauthorized,
    RedeemFailed,
)

# Accrual
from .accrual import (
    elapsed_time,
    accrued_balance,
    accrued_interest,
    interest_since,
)

# Components
from .token_ledger import TokenLedger
from .rates import RateRegistry
from .settlement import Settlement, SettlementCoordinator

# Ledger
from .ledger import RebaseLedger

# Vault
from .vault import Vault

__all__ = [
    # Core
    'PRECISION_FACTOR', 'MAX_AMOUNT', 'ALL', 'DEFAULT_INTEREST_RATE',
    'RatePolicy', 'EventType', 'HolderAccount', 'LedgerEvent', 'RateSetter',
    'RawBalanceProvider',
    'LedgerError', 'PolicyViolation', 'RateIncreaseRejected', 'RateDecreaseRejected',
    'InsufficientBalance', 'InsufficientAllowance', 'AllowanceExceeded',
    'Unauthorized', 'RedeemFailed',
    # Accrual
    'elapsed_time', 'accrued_balance', 'accrued_interest', 'interest_since',
    # Components
    'TokenLedger', 'RateRegistry', 'Settlement', 'SettlementCoordinator',
    # Ledger
    'RebaseLedger',
    # Vault
    'Vault',
]

__version__ = '1.0.0'
