"""A proof-of-work chain of hashed blocks."""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Iterator


def sha256_hex(text: str) -> str:
    """Return the lower-case hex SHA-256 digest of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class Block:
    """One block of the chain; its hash is computed on creation."""

    index: int
    data: str
    previous_hash: str
    timestamp: int = field(default_factory=time.time_ns)
    nonce: int = 0
    hash: str = ""

    def __post_init__(self) -> None:
        if not self.hash:
            self.hash = self.calculate_hash()

    def calculate_hash(self) -> str:
        """Hash the block's contents together with its nonce."""
        return sha256_hex(
            f"{self.index}{self.timestamp}{self.data}{self.previous_hash}{self.nonce}"
        )

    def mine(self, difficulty: int) -> None:
        """Raise the nonce until the hash starts with ``difficulty`` zeros."""
        target = "0" * difficulty
        while not self.hash.startswith(target):
            self.nonce += 1
            self.hash = self.calculate_hash()


class BlockChain:
    """An append-only list of mined blocks starting with a genesis block."""

    def __init__(self, difficulty: int = 2) -> None:
        self.difficulty = difficulty
        self.log = logging.getLogger("blockchain")
        self._chain: list[Block] = []
        genesis = Block(0, "Genesis Block", "0")
        genesis.mine(self.difficulty)
        self._chain.append(genesis)

    def add_block(self, data: str) -> None:
        """Mine a new block holding ``data`` and append it."""
        if not self._chain:
            raise RuntimeError("Chain is empty, cannot add block")
        block = Block(len(self._chain), data, self._chain[-1].hash)
        block.mine(self.difficulty)
        self._chain.append(block)

    def is_valid(self) -> bool:
        """Check hashes, links and proof of work for every non-genesis block."""
        if not self._chain:
            return False
        target = "0" * self.difficulty
        for previous, current in zip(self._chain, self._chain[1:]):
            if current.hash != current.calculate_hash():
                return False
            if current.previous_hash != previous.hash:
                return False
            if not current.hash.startswith(target):
                return False
        return True

    def __len__(self) -> int:
        return len(self._chain)

    def __getitem__(self, index: int) -> Block:
        if not 0 <= index < len(self._chain):
            raise IndexError("Block index out of range")
        return self._chain[index]

    def __iter__(self) -> Iterator[Block]:
        return iter(self._chain)

    @property
    def latest_block(self) -> Block:
        """The most recently appended block."""
        if not self._chain:
            raise RuntimeError("Chain is empty")
        return self._chain[-1]

    @property
    def chain(self) -> tuple[Block, ...]:
        """The blocks of the chain, oldest first."""
        return tuple(self._chain)