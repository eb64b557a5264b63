"""Wallets whose transactions are recorded into a blockchain."""

from __future__ import annotations

import logging
import threading

from .blockchain import BlockChain
from .wallet import Wallet


class LedgerError(Exception):
    """Raised when a ledger operation cannot be carried out."""


class Ledger:
    """Named wallets plus a buffer of pending transactions committed as blocks.

    Failures of the wallet arithmetic itself surface as ``WalletError``.
    """

    def __init__(self, difficulty: int = 2) -> None:
        self.log = logging.getLogger("ledger")
        self._wallets: dict[str, Wallet] = {}
        self._blockchain = BlockChain(difficulty)
        self._pending: list[str] = []
        self._lock = threading.Lock()

    def _wallet(self, wallet_id: str, role: str = "Wallet") -> Wallet:
        try:
            return self._wallets[wallet_id]
        except KeyError:
            raise LedgerError(f"{role} not found: {wallet_id}") from None

    def create_wallet(self, wallet_id: str) -> None:
        """Add an empty wallet under ``wallet_id``."""
        with self._lock:
            if wallet_id in self._wallets:
                raise LedgerError(f"Wallet already exists: {wallet_id}")
            self._wallets[wallet_id] = Wallet()

    def remove_wallet(self, wallet_id: str) -> None:
        """Delete the wallet named ``wallet_id``."""
        with self._lock:
            self._wallet(wallet_id)
            del self._wallets[wallet_id]

    def has_wallet(self, wallet_id: str) -> bool:
        with self._lock:
            return wallet_id in self._wallets

    def balance(self, wallet_id: str) -> int:
        """Return the balance of ``wallet_id``."""
        with self._lock:
            return self._wallet(wallet_id).balance

    def deposit(self, wallet_id: str, amount: int) -> None:
        with self._lock:
            self._wallet(wallet_id).deposit(amount)
            self._pending.append(_format("DEPOSIT", "SYSTEM", wallet_id, amount))

    def withdraw(self, wallet_id: str, amount: int) -> None:
        with self._lock:
            self._wallet(wallet_id).withdraw(amount)
            self._pending.append(_format("WITHDRAW", wallet_id, "SYSTEM", amount))

    def transfer(self, from_wallet: str, to_wallet: str, amount: int) -> None:
        with self._lock:
            source = self._wallet(from_wallet, "Source wallet")
            destination = self._wallet(to_wallet, "Destination wallet")
            source.transfer(destination, amount)
            self._pending.append(_format("TRANSFER", from_wallet, to_wallet, amount))

    def add_transaction(self, transaction: str) -> None:
        """Queue a free-form transaction record."""
        with self._lock:
            self._pending.append(transaction)

    def clear_pending_transactions(self) -> None:
        with self._lock:
            self._pending.clear()

    @property
    def pending_transactions(self) -> list[str]:
        """A copy of the transactions not yet committed."""
        with self._lock:
            return list(self._pending)

    def commit_transactions(self) -> None:
        """Pack the pending transactions into a new mined block."""
        with self._lock:
            if not self._pending:
                raise LedgerError("No pending transactions to commit")
            packed = f"[{len(self._pending)} transactions]\n" + "".join(
                f"{tx}\n" for tx in self._pending
            )
            try:
                self._blockchain.add_block(packed)
            except Exception as exc:
                raise LedgerError(f"Failed to commit transactions: {exc}") from exc
            self._pending.clear()

    @property
    def blockchain(self) -> BlockChain:
        return self._blockchain

    @property
    def block_count(self) -> int:
        return len(self._blockchain)

    def is_valid(self) -> bool:
        return self._blockchain.is_valid()


def _format(kind: str, source: str, destination: str, amount: int) -> str:
    return f"{kind}: {source} -> {destination}: {amount}"