"""A single account balance with guarded arithmetic."""

from __future__ import annotations

INT64_MAX = 2**63 - 1


class WalletError(Exception):
    """Raised when a wallet operation cannot be carried out."""


class Wallet:
    """Holds a signed 64-bit balance and refuses invalid changes to it."""

    def __init__(self, balance: int = 0) -> None:
        self.balance = balance

    def __repr__(self) -> str:
        return f"Wallet(balance={self.balance})"

    def deposit(self, amount: int) -> None:
        """Add ``amount`` to the balance."""
        if amount < 0:
            raise WalletError("Deposit amount must be non-negative")
        if self.balance > INT64_MAX - amount:
            raise WalletError("Deposit would cause balance overflow")
        self.balance += amount

    def withdraw(self, amount: int) -> None:
        """Take ``amount`` from the balance."""
        if amount < 0:
            raise WalletError("Withdrawal amount must be non-negative")
        if self.balance < amount:
            raise WalletError("Insufficient balance")
        self.balance -= amount

    def transfer(self, destination: Wallet, amount: int) -> None:
        """Move ``amount`` from this wallet to ``destination``."""
        if amount < 0:
            raise WalletError("Transfer amount must be non-negative")
        if self.balance < amount:
            raise WalletError("Insufficient balance for transfer")
        if destination.balance > INT64_MAX - amount:
            raise WalletError("Transfer would cause destination overflow")
        self.balance -= amount
        destination.balance += amount

    def has_balance(self, amount: int) -> bool:
        """Return True if the balance covers ``amount``."""
        return self.balance >= amount

    def is_empty(self) -> bool:
        """Return True if the balance is zero."""
        return self.balance == 0

    def reset(self) -> None:
        """Set the balance back to zero."""
        self.balance = 0