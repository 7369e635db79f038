"""
ledger.py - Interest-bearing token ledger

RebaseLedger is the public operation set. It composes the raw token ledger,
the rate registry and the settlement coordinator, and is the only class that
calls their mutators.

Key responsibilities:
    - Settles every holder an operation touches before changing their balance
    - Freezes a holder's personal rate on first mint, and propagates rates on
      every transfer into an empty balance
    - Guards the global rate with its RatePolicy
    - Executes every operation atomically: all checks run before any mutation
    - Always logs: every applied operation appends LedgerEvents to the audit log
"""

from __future__ import annotations
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from .core import (
    # Types
    HolderAccount, LedgerEvent, EventType, RatePolicy, RateSetter,
    # Constants
    ALL, DEFAULT_INTEREST_RATE,
    # Exceptions
    LedgerError, InsufficientBalance, Unauthorized,
    # Helpers
    validate_amount, validate_holder,
)
from .rates import RateRegistry
from .settlement import Settlement, SettlementCoordinator
from .token_ledger import TokenLedger


EventCallback = Callable[[LedgerEvent], None]


class RebaseLedger:
    """
    Token ledger whose balances grow by per-holder simple interest.

    Every holder freezes a personal rate the first time they are credited.
    Interest accrues linearly on the raw balance from the last settlement and
    is materialized ("settled") whenever an operation touches the holder.
    balance_of() reports raw balance plus live accrual without settling.

    Thread Safety:
        Not thread-safe. Operations are expected to be serialized by the caller.

    Example:
        ledger = RebaseLedger("main", initial_rate=5 * 10**10, verbose=False)
        ledger.mint("alice", 1_000)
        ledger.advance_time(3600)
        ledger.balance_of("alice")            # > 1_000
        ledger.transfer("alice", "bob", ALL)  # moves principal + interest
    """

    def __init__(
        self,
        name: str,
        initial_rate: int = DEFAULT_INTEREST_RATE,
        initial_time: int = 0,
        verbose: bool = True,
        rate_policy: RatePolicy = RatePolicy.DECREASE_ONLY,
    ):
        """
        Create a ledger.

        Args:
            name: Ledger identifier
            initial_rate: Starting global rate (per second, scaled by PRECISION_FACTOR)
            initial_time: Starting clock value in seconds (default: 0)
            verbose: Print applied and rejected operations (default: True)
            rate_policy: Direction the global rate may move (default: DECREASE_ONLY)
        """
        self.name = name
        self.accounts: Dict[str, HolderAccount] = {}
        self.tokens = TokenLedger(self.accounts)
        self.rates = RateRegistry(self.accounts, initial_rate, rate_policy)
        self.settlements = SettlementCoordinator(self.tokens, self.rates)
        self.events: List[LedgerEvent] = []
        self.verbose = verbose
        self._current_time: int = validate_amount(initial_time, "initial_time")
        self._subscribers: List[EventCallback] = []

    # ========================================================================
    # TIME MANAGEMENT
    # ========================================================================

    @property
    def current_time(self) -> int:
        """Current logical time of the ledger, in seconds."""
        return self._current_time

    def advance_time(self, new_time: int) -> None:
        """
        Advance the ledger's logical clock. Time can only move forward.

        Raises:
            ValueError: If new_time is before the current time
        """
        validate_amount(new_time, "new_time")
        if new_time < self._current_time:
            raise ValueError(
                f"Cannot move time backwards: {new_time} < {self._current_time}"
            )
        self._current_time = new_time

    # ========================================================================
    # QUERIES (read-only, never settle)
    # ========================================================================

    def principal_balance_of(self, holder: str) -> int:
        """Raw balance only, excluding interest not yet settled."""
        return self.tokens.raw_balance_of(holder)

    def display_balance_of(self, holder: str, at: Optional[int] = None) -> int:
        """
        Raw balance plus interest accrued since the last settlement.

        Args:
            holder: Holder ID
            at: Clock value to project to (default: current time)
        """
        now = self._current_time if at is None else validate_amount(at, "at")
        return self.settlements.preview(holder, now).raw_after

    def balance_of(self, holder: str) -> int:
        return self.display_balance_of(holder)

    def get_interest_rate(self) -> int:
        return self.rates.global_rate

    def get_user_interest_rate(self, holder: str) -> int:
        return self.rates.get_holder_rate(holder)

    def allowance(self, owner: str, spender: str) -> int:
        return self.tokens.allowance(owner, spender)

    def total_supply(self) -> int:
        """Sum of raw balances (settled supply)."""
        return self.tokens.total_supply()

    def total_display_supply(self) -> int:
        """Sum of display balances: settled supply plus all unsettled accrual."""
        return sum(
            self.display_balance_of(holder) for holder in sorted(self.accounts)
        )

    def list_holders(self) -> List[str]:
        """Holders the ledger has a record for, including emptied ones."""
        return sorted(self.accounts)

    # ========================================================================
    # EVENTS
    # ========================================================================

    def subscribe(self, callback: EventCallback) -> None:
        """Call callback with every event recorded after this point."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: EventCallback) -> None:
        self._subscribers.remove(callback)

    def events_of_type(self, event_type: EventType) -> List[LedgerEvent]:
        return [e for e in self.events if e.event_type is event_type]

    def _emit(
        self,
        event_type: EventType,
        source: Optional[str] = None,
        dest: Optional[str] = None,
        amount: int = 0,
        **data,
    ) -> None:
        self.events.append(LedgerEvent(
            sequence=len(self.events),
            event_type=event_type,
            timestamp=self._current_time,
            source=source,
            dest=dest,
            amount=amount,
            data=data,
        ))

    def _notify(self, first: int) -> None:
        """
        Deliver events recorded since index first to all subscribers.

        The operation has already been applied, so a failing subscriber is
        reported and skipped rather than raised to the caller.
        """
        for event in self.events[first:]:
            for callback in list(self._subscribers):
                try:
                    callback(event)
                except Exception as error:
                    self._report(
                        "✗", f"SUBSCRIBER {event.event_type.value}: "
                             f"{type(error).__name__}: {error}"
                    )

    def _report(self, icon: str, message: str) -> None:
        if self.verbose:
            print(f"{icon} {message}")

    # ========================================================================
    # SETTLEMENT
    # ========================================================================

    def _apply_settlement(self, settlement: Settlement) -> None:
        self.settlements.apply(settlement)
        if settlement.interest:
            self._emit(
                EventType.INTEREST_SETTLED,
                dest=settlement.holder,
                amount=settlement.interest,
                elapsed=settlement.elapsed,
            )

    def _freeze_rate(self, holder: str, rate: int, reason: str) -> None:
        self.rates.freeze_holder_rate(holder, rate)
        self._emit(EventType.RATE_FROZEN, dest=holder, amount=rate, reason=reason)

    def settle(self, holder: str) -> int:
        """
        Settle holder's accrued interest at the current time.

        Returns:
            Interest credited (0 when already settled at this timestamp)
        """
        validate_holder(holder)
        first = len(self.events)
        settlement = self.settlements.preview(holder, self._current_time)
        self._apply_settlement(settlement)
        self._notify(first)
        return settlement.interest

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def mint(self, to: str, amount: int) -> int:
        """
        Credit amount to holder after settling them.

        A holder minted for the first time freezes the current global rate.

        Returns:
            The amount minted
        """
        validate_holder(to)
        validate_amount(amount)
        first = len(self.events)

        # Seeding creates the account, so the settlement below sets its baseline
        settlement = self.settlements.preview(to, self._current_time)
        if not self.rates.is_seeded(to):
            self._freeze_rate(to, self.rates.global_rate, reason="mint")
        self._apply_settlement(settlement)
        self.tokens.credit(to, amount)
        self._emit(EventType.MINT, dest=to, amount=amount)

        self._report("✓", f"MINT {to} +{amount}")
        self._notify(first)
        return amount

    def burn(self, source: str, amount: int) -> int:
        """
        Debit amount from holder after settling them.

        Passing ALL burns the holder's full display balance, principal and
        interest, leaving zero behind.

        Returns:
            The amount burned

        Raises:
            InsufficientBalance: If amount exceeds the settled balance
        """
        validate_holder(source)
        validate_amount(amount)
        try:
            settlement = self.settlements.preview(source, self._current_time)
            resolved = settlement.raw_after if amount == ALL else amount
            if resolved > settlement.raw_after:
                raise InsufficientBalance(source, settlement.raw_after, resolved)
        except LedgerError as error:
            self._report("✗", f"REJECTED: {error}")
            raise

        first = len(self.events)
        self._apply_settlement(settlement)
        self.tokens.debit(source, resolved)
        self._emit(EventType.BURN, source=source, amount=resolved)

        self._report("✓", f"BURN {source} -{resolved}")
        self._notify(first)
        return resolved

    def transfer(self, source: str, dest: str, amount: int) -> int:
        """
        Move amount from source to dest after settling both.

        If dest holds nothing (after settlement), dest takes over source's
        frozen rate. A dest that already holds a balance keeps its own rate.

        Returns:
            The amount moved

        Raises:
            InsufficientBalance: If amount exceeds source's settled balance
        """
        return self._transfer(None, source, dest, amount)

    def transfer_from(self, spender: str, source: str, dest: str, amount: int) -> int:
        """
        Move amount from source to dest on behalf of spender.

        Same settlement and rate rules as transfer(). The spender's allowance
        is consumed by the resolved amount.

        Raises:
            InsufficientBalance: If amount exceeds source's settled balance
            InsufficientAllowance: If spender's allowance is below the amount
        """
        validate_holder(spender)
        return self._transfer(spender, source, dest, amount)

    def _transfer(
        self,
        spender: Optional[str],
        source: str,
        dest: str,
        amount: int,
    ) -> int:
        validate_holder(source)
        validate_holder(dest)
        validate_amount(amount)
        now = self._current_time

        # Plan and validate everything before mutating
        try:
            source_settlement = self.settlements.preview(source, now)
            dest_settlement = (
                self.settlements.preview(dest, now) if dest != source else None
            )
            available = source_settlement.raw_after
            resolved = available if amount == ALL else amount
            if resolved > available:
                raise InsufficientBalance(source, available, resolved)
            if spender is not None:
                self.tokens.check_allowance(source, spender, resolved)
        except LedgerError as error:
            self._report("✗", f"REJECTED: {error}")
            raise

        first = len(self.events)
        self._apply_settlement(source_settlement)
        if dest_settlement is not None:
            # Empty receivers inherit the sender's rate, whatever the amount
            if dest_settlement.raw_after == 0:
                self._freeze_rate(dest, self.rates.get_holder_rate(source), reason="transfer")
            self._apply_settlement(dest_settlement)
        if spender is not None:
            self.tokens.spend_allowance(source, spender, resolved)

        self.tokens.move_raw(source, dest, resolved)
        self._emit(
            EventType.TRANSFER, source=source, dest=dest, amount=resolved,
            **({"spender": spender} if spender is not None else {}),
        )

        self._report("✓", f"TRANSFER {source} → {dest} {resolved}")
        self._notify(first)
        return resolved

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Allow spender to move up to amount of owner's balance (ALL = unlimited)."""
        self.tokens.approve(owner, spender, amount)
        first = len(self.events)
        self._emit(EventType.APPROVAL, source=owner, dest=spender, amount=amount)
        self._report("✓", f"APPROVE {owner} → {spender} {amount}")
        self._notify(first)

    def set_interest_rate(self, new_rate: int, authority: RateSetter) -> None:
        """
        Change the global rate applied to holders seeded from now on.

        Holders who already froze a rate are unaffected.

        Args:
            new_rate: New per-second rate, scaled by PRECISION_FACTOR
            authority: Capability issued by the external authorization check

        Raises:
            Unauthorized: If authority is not a RateSetter
            PolicyViolation: If the change breaks the rate policy
        """
        try:
            if not isinstance(authority, RateSetter):
                raise Unauthorized("set_interest_rate requires a RateSetter capability")
            self.rates.check_global_rate(new_rate)
        except LedgerError as error:
            self._report("✗", f"REJECTED: {error}")
            raise

        first = len(self.events)
        old_rate = self.rates.set_global_rate(new_rate)
        self._emit(
            EventType.RATE_CHANGED, amount=new_rate,
            old_rate=old_rate, principal=authority.principal,
        )
        self._report("✓", f"RATE {old_rate} → {new_rate} by {authority.principal}")
        self._notify(first)

    # ========================================================================
    # SNAPSHOTS
    # ========================================================================

    def clone(self) -> RebaseLedger:
        """
        Create an independent deep copy of this ledger.

        Cloned state includes accounts, allowances, rates, clock and the event
        log. Subscribers are not copied.
        """
        cloned = RebaseLedger(
            name=self.name,
            initial_rate=self.rates.global_rate,
            initial_time=self._current_time,
            verbose=self.verbose,
            rate_policy=self.rates.policy,
        )
        # Fill the shared dict in place; tokens and rates hold references to it
        for holder, account in self.accounts.items():
            cloned.accounts[holder] = replace(account)
        cloned.tokens.allowances = dict(self.tokens.allowances)
        cloned.tokens._total_supply = self.tokens.total_supply()
        cloned.events = list(self.events)
        return cloned
