"""
vault.py - Deposit/redeem front end for the ledger

The vault holds the underlying asset. Deposits mint ledger tokens one for
one; redemptions burn tokens and pay the underlying out of the reserve.
Interest paid on redemption comes from rewards funded into the reserve, so a
vault whose reserve cannot cover a redemption rejects it before burning.
"""

from __future__ import annotations

from .core import ALL, RedeemFailed, validate_amount, validate_holder
from .ledger import RebaseLedger


class Vault:
    """
    Underlying-asset reserve that mints and burns on a RebaseLedger.

    Example:
        vault = Vault(ledger)
        vault.deposit("alice", 1_000)
        vault.fund_rewards(100)
        vault.redeem("alice", ALL)
    """

    def __init__(self, ledger: RebaseLedger, reserve: int = 0):
        self.ledger = ledger
        self._reserve = validate_amount(reserve, "reserve")

    @property
    def reserve(self) -> int:
        """Underlying held by the vault."""
        return self._reserve

    def deposit(self, holder: str, amount: int) -> int:
        """Take amount of underlying from holder and mint the same in tokens."""
        validate_holder(holder)
        validate_amount(amount)
        self.ledger.mint(holder, amount)
        self._reserve += amount
        return amount

    def redeem(self, holder: str, amount: int) -> int:
        """
        Burn amount of holder's tokens and pay out the same in underlying.

        ALL redeems the holder's full display balance.

        Returns:
            Underlying paid out

        Raises:
            RedeemFailed: If the reserve cannot cover the payout
            InsufficientBalance: If amount exceeds the holder's balance
        """
        validate_holder(holder)
        validate_amount(amount)
        payout = self.ledger.balance_of(holder) if amount == ALL else amount
        if payout > self._reserve:
            if self.ledger.verbose:
                print(f"✗ REJECTED: redeem {holder} {payout} exceeds reserve {self._reserve}")
            raise RedeemFailed(
                f"Vault reserve {self._reserve} cannot cover redemption of {payout}"
            )
        burned = self.ledger.burn(holder, payout)
        self._reserve -= burned
        return burned

    def fund_rewards(self, amount: int) -> None:
        """Add underlying to the reserve without minting tokens."""
        self._reserve += validate_amount(amount)
