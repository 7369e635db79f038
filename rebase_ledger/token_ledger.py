"""
token_ledger.py - Raw fungible-token bookkeeping

TokenLedger records literally minted/burned balances, allowances and total
supply. It knows nothing about interest: every amount it reports excludes
accrual that has not yet been settled.

All mutators validate before they mutate, so a raised exception leaves the
ledger unchanged.
"""

from __future__ import annotations
from typing import Optional

from .core import (
    Accounts, Allowances, HolderAccount,
    MAX_AMOUNT,
    InsufficientBalance, InsufficientAllowance,
    validate_amount, validate_holder,
)


class TokenLedger:
    """
    Raw balance, allowance and supply bookkeeping.

    Balances live in the shared HolderAccount records passed in by the owner
    of the ledger state, so the rate registry sees the same records.
    """

    def __init__(self, accounts: Optional[Accounts] = None):
        self.accounts: Accounts = accounts if accounts is not None else {}
        self.allowances: Allowances = {}
        self._total_supply: int = 0

    def _account(self, holder: str) -> HolderAccount:
        account = self.accounts.get(holder)
        if account is None:
            account = HolderAccount()
            self.accounts[holder] = account
        return account

    # ========================================================================
    # QUERIES
    # ========================================================================

    def raw_balance_of(self, holder: str) -> int:
        account = self.accounts.get(holder)
        return account.raw_balance if account is not None else 0

    def total_supply(self) -> int:
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner, spender), 0)

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def credit(self, holder: str, amount: int) -> None:
        """Add amount to holder's raw balance and to total supply."""
        validate_holder(holder)
        validate_amount(amount)
        if amount == 0:
            return
        self._account(holder).raw_balance += amount
        self._total_supply += amount

    def debit(self, holder: str, amount: int) -> None:
        """
        Remove amount from holder's raw balance and from total supply.

        Raises:
            InsufficientBalance: If amount exceeds the raw balance
        """
        validate_holder(holder)
        validate_amount(amount)
        available = self.raw_balance_of(holder)
        if amount > available:
            raise InsufficientBalance(holder, available, amount)
        if amount == 0:
            return
        self._account(holder).raw_balance -= amount
        self._total_supply -= amount

    def move_raw(self, source: str, dest: str, amount: int) -> None:
        """
        Move amount of raw balance from source to dest. Supply is unchanged.

        Raises:
            InsufficientBalance: If amount exceeds source's raw balance
        """
        validate_holder(source)
        validate_holder(dest)
        validate_amount(amount)
        available = self.raw_balance_of(source)
        if amount > available:
            raise InsufficientBalance(source, available, amount)
        if amount == 0 or source == dest:
            return
        self._account(source).raw_balance -= amount
        self._account(dest).raw_balance += amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set (not add to) the amount spender may move on owner's behalf."""
        validate_holder(owner)
        validate_holder(spender)
        validate_amount(amount)
        self.allowances[(owner, spender)] = amount

    def check_allowance(self, owner: str, spender: str, amount: int) -> None:
        """
        Raise if spender may not move amount on owner's behalf.

        Raises:
            InsufficientAllowance: If the allowance is below amount
        """
        available = self.allowance(owner, spender)
        if available != MAX_AMOUNT and amount > available:
            raise InsufficientAllowance(owner, spender, available, amount)

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """
        Consume amount of spender's allowance. MAX_AMOUNT is unlimited and
        is never decremented.

        Raises:
            InsufficientAllowance: If the allowance is below amount
        """
        validate_amount(amount)
        self.check_allowance(owner, spender, amount)
        available = self.allowance(owner, spender)
        if available != MAX_AMOUNT:
            self.allowances[(owner, spender)] = available - amount
