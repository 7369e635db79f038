"""
Core types and constants for the interest-bearing token ledger.

This module provides the foundational data structures for the ledger:
1. Constants: fixed-point scale, the "all" sentinel, default rate
2. Enums: RatePolicy, EventType
3. Exceptions: LedgerError and domain-specific error types
4. Records: HolderAccount (mutable, one per holder), LedgerEvent (immutable)
5. Capabilities: RateSetter, the pre-validated authority for rate changes

All amounts, rates and timestamps are Python ints. Rates are expressed per
second of elapsed time and scaled by PRECISION_FACTOR.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Protocol, Tuple, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Fixed-point scale for rates: a rate of PRECISION_FACTOR means 100% per second.
PRECISION_FACTOR = 10 ** 18

# Largest representable amount. Passing it to burn/transfer means
# "my full current balance"; as an allowance it means "unlimited".
MAX_AMOUNT = 2 ** 256 - 1
ALL = MAX_AMOUNT

# 5e-8 per second (roughly 158% simple interest per year).
DEFAULT_INTEREST_RATE = 5 * 10 ** 10


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from holder ID to the holder's single account record.
Accounts = Dict[str, 'HolderAccount']

# Mapping from (owner, spender) to remaining allowance.
Allowances = Dict[Tuple[str, str], int]


# ============================================================================
# ENUMS
# ============================================================================

class RatePolicy(Enum):
    """
    Direction in which the global interest rate is allowed to move.

    DECREASE_ONLY: New rates must be <= the current rate. Early holders
                   always keep a rate at least as good as later ones.
    INCREASE_ONLY: New rates must be >= the current rate. This mirrors the
                   literal comparison of the reference rate setter.
    """
    DECREASE_ONLY = "decrease_only"
    INCREASE_ONLY = "increase_only"


class EventType(Enum):
    """Classification of ledger events written to the audit log."""
    MINT = "mint"
    BURN = "burn"
    TRANSFER = "transfer"
    APPROVAL = "approval"
    INTEREST_SETTLED = "interest_settled"
    RATE_FROZEN = "rate_frozen"
    RATE_CHANGED = "rate_changed"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class PolicyViolation(LedgerError):
    """Raised when a rate change breaks the ledger's rate policy."""

    def __init__(self, old_rate: int, new_rate: int, message: str):
        super().__init__(message)
        self.old_rate = old_rate
        self.new_rate = new_rate


class RateIncreaseRejected(PolicyViolation):
    """Raised when a rate increase is attempted under RatePolicy.DECREASE_ONLY."""

    def __init__(self, old_rate: int, new_rate: int):
        super().__init__(
            old_rate, new_rate,
            f"Interest rate can only decrease: {new_rate} > {old_rate}"
        )


class RateDecreaseRejected(PolicyViolation):
    """Raised when a rate decrease is attempted under RatePolicy.INCREASE_ONLY."""

    def __init__(self, old_rate: int, new_rate: int):
        super().__init__(
            old_rate, new_rate,
            f"Interest rate can only increase: {new_rate} < {old_rate}"
        )


class InsufficientBalance(LedgerError):
    """Raised when a debit or transfer exceeds the holder's settled raw balance."""

    def __init__(self, holder: str, available: int, requested: int):
        super().__init__(
            f"{holder}: insufficient balance ({available} < {requested})"
        )
        self.holder = holder
        self.available = available
        self.requested = requested


class InsufficientAllowance(LedgerError):
    """Raised when a delegated transfer exceeds the spender's allowance."""

    def __init__(self, owner: str, spender: str, available: int, requested: int):
        super().__init__(
            f"{spender} on behalf of {owner}: insufficient allowance "
            f"({available} < {requested})"
        )
        self.owner = owner
        self.spender = spender
        self.available = available
        self.requested = requested


AllowanceExceeded = InsufficientAllowance


class Unauthorized(LedgerError):
    """Raised when an administrative call is made without a valid capability."""
    pass


class RedeemFailed(LedgerError):
    """Raised when the vault's reserve cannot cover a redemption."""
    pass


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def validate_amount(amount: Any, name: str = "amount") -> int:
    """
    Check that a value is a non-negative int (bools are rejected).

    Returns the amount unchanged so callers can validate inline.

    Raises:
        ValueError: If the value is not an int or is negative.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"{name} must be non-negative, got {amount}")
    return amount


def validate_holder(holder: Any) -> str:
    """Check that a holder ID is a non-empty string."""
    if not isinstance(holder, str) or not holder.strip():
        raise ValueError(f"Holder ID must be a non-empty string, got {holder!r}")
    return holder


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(slots=True)
class HolderAccount:
    """
    Everything the ledger knows about one holder, kept in a single record.

    The token ledger owns raw_balance; the rate registry owns rate and
    last_settled. Both operate on the same record so that a settlement never
    updates one store without the other.

    Attributes:
        raw_balance: Literally credited/debited amount, excluding unsettled interest.
        rate: Frozen personal rate, or None if the holder was never seeded.
        last_settled: Clock value of the last settlement, or None if never settled.
    """
    raw_balance: int = 0
    rate: Optional[int] = None
    last_settled: Optional[int] = None

    @property
    def is_seeded(self) -> bool:
        return self.rate is not None


@dataclass(frozen=True, slots=True)
class LedgerEvent:
    """
    An immutable record of something that happened on the ledger.

    Attributes:
        sequence: Monotonic position of the event within its ledger.
        event_type: What happened.
        timestamp: Ledger clock value when the event was recorded.
        source: Holder debited (or owner, for approvals), if any.
        dest: Holder credited (or spender, for approvals), if any.
        amount: Amount moved, approved, settled, or the new rate.
        data: Extra details (e.g. old rate on RATE_CHANGED).
    """
    sequence: int
    event_type: EventType
    timestamp: int
    source: Optional[str] = None
    dest: Optional[str] = None
    amount: int = 0
    data: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        parts = [f"#{self.sequence}", self.event_type.value, f"t={self.timestamp}"]
        if self.source:
            parts.append(f"from={self.source}")
        if self.dest:
            parts.append(f"to={self.dest}")
        parts.append(f"amount={self.amount}")
        return f"LedgerEvent({', '.join(parts)})"


# ============================================================================
# CAPABILITIES
# ============================================================================

@dataclass(frozen=True, slots=True)
class RateSetter:
    """
    Proof that an external authorization check has admitted the caller.

    The ledger does not decide who may change the global rate. Whatever
    guards the administrative surface issues a RateSetter, and the ledger
    only accepts rate changes that present one.
    """
    principal: str

    def __post_init__(self):
        if not self.principal or not self.principal.strip():
            raise ValueError("RateSetter principal cannot be empty")


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class RawBalanceProvider(Protocol):
    """
    Read access to un-accrued balances.

    The accrual-aware balance functions wrap a provider; the provider never
    calls back into them.
    """

    def raw_balance_of(self, holder: str) -> int:
        """Return the holder's raw balance (0 for unknown holders)."""
        ...

    def total_supply(self) -> int:
        """Return the sum of all raw balances."""
        ...
