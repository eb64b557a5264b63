# ppledger

This is a small accounting ledger. Wallets hold integer balances.
Deposits, withdrawals and transfers are queued as pending transactions.
Committing them packs them into one block on a proof-of-work block chain.
The package also has a simple on-disk block store. It is made of
size-limited block files and a directory index that maps block ids to
file locations.

The package has no third-party dependencies. The tests use pytest and
are installed with the `test` extra: `pip install ".[test]"`.

## Wallets

`ppledger.wallet.Wallet` holds a signed 64-bit balance.

```python
from ppledger.wallet import Wallet, WalletError

alice = Wallet(1000)
bob = Wallet()
alice.transfer(bob, 200)
assert alice.balance == 800 and bob.balance == 200

try:
    alice.withdraw(5000)
except WalletError as err:
    print(err)          # Insufficient balance
```

The following raise `WalletError`:

- negative amounts;
- withdrawals or transfers larger than the balance;
- deposits or transfers that would push a balance past `2**63 - 1`.

`has_balance(amount)`, `is_empty()` and `reset()` complete the class.

## Ledger

```python
from ppledger.ledger import Ledger, LedgerError

ledger = Ledger(difficulty=2)
ledger.create_wallet("Alice")
ledger.create_wallet("Bob")
ledger.deposit("Alice", 1000)
ledger.transfer("Alice", "Bob", 200)

print(ledger.pending_transactions)
# ['DEPOSIT: SYSTEM -> Alice: 1000', 'TRANSFER: Alice -> Bob: 200']

ledger.commit_transactions()      # mines one block holding both
assert ledger.block_count == 2    # genesis + 1
assert ledger.is_valid()
assert ledger.balance("Bob") == 200
```

The ledger raises `LedgerError` in these cases:

- a wallet is unknown;
- a wallet being created already exists;
- there is nothing to commit.

A refused amount is reported by the wallet itself as `WalletError`. Free-form records can be queued with `add_transaction()`. The queue is emptied with `clear_pending_transactions()`. The underlying chain is available as `ledger.blockchain`. All ledger operations are guarded by a lock.

## Block chain

```python
from ppledger.blockchain import BlockChain

chain = BlockChain(difficulty=2)
chain.add_block("Transaction 1: Alice -> Bob: 10 coins")
print(len(chain), chain.latest_block.data)
for block in chain:
    print(block.index, block.hash)
```

A block's hash is the SHA-256 of five fields put together: its index,
timestamp (nanoseconds), data, previous hash and nonce. Mining raises the
nonce until the hash starts with `difficulty` zeros. `is_valid()` checks
each block after the genesis block: its hash, its link to the previous
block and its proof of work. Indexing out of range raises `IndexError`.

## Block storage

```python
from ppledger.blockdir import BlockDir

with BlockDir("/tmp/blocks", max_file_size=100 * 1024 * 1024) as store:
    store.write_block(1001, b"Block #1")
    data = store.read_block(1001)
    print(store.block_location(1001))
```

Blocks are written to `block_000001.dat`, `block_000002.dat`, and so on.
A new file is started when the current one cannot fit the next block.
The index lives in `blocks.index` and is rewritten after every write, so a
reopened directory finds its blocks again. Writing an existing block id,
or reading an unknown one, raises `BlockDirError`.
`ppledger.blockfile.BlockFile` is the single-file layer underneath. It
appends data, returns its offset, and refuses writes past `max_size` with
`BlockFileError`. It can also be used on its own.

## Logging

Each component logs through the standard `logging` module under its own
name: `blockchain`, `ledger`, `server`, `blockfile` and `blockdir`.

## What it does not do

- `ppledger.server.Server` only records whether it has been started and on
  which port. It does not open sockets or serve requests.
- The ledger keeps its wallets and chain in memory. It does not save them
  through the block store.
- There is no command-line program. The package is used as a library.