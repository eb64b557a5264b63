"""Wallets, a transaction ledger on a proof-of-work block chain, and file-based block storage."""

__version__ = "1.0.0"

__all__ = ["wallet", "blockchain", "ledger", "server", "blockfile", "blockdir"]