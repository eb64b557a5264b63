import pytest

from ppledger.blockdir import BlockDir, BlockDirError, BlockLocation


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "pp-ledger-blockdir-test"


@pytest.fixture
def block_dir(store_dir):
    bd = BlockDir(store_dir, 100)
    yield bd
    bd.close()


def test_initializes_successfully(block_dir, store_dir):
    assert store_dir.is_dir()
    assert block_dir.block_count == 0
    assert block_dir.file_count == 0


def test_writes_block(block_dir, store_dir):
    block_dir.write_block(1001, b"Block #1: First block of data\0")
    assert block_dir.block_count == 1
    assert (store_dir / "block_000001.dat").exists()


def test_reads_block_back(block_dir):
    data = b"Test block data\0"
    block_dir.write_block(1001, data)
    assert block_dir.read_block(1001, 256) == data


def test_has_block_returns_true_for_existing_block(block_dir):
    block_dir.write_block(1001, b"Block data\0")
    assert block_dir.has_block(1001)


def test_has_block_returns_false_for_non_existent_block(block_dir):
    assert not block_dir.has_block(9999)


def test_rejects_duplicate_block(block_dir):
    data = b"Block data\0"
    block_dir.write_block(1001, data)
    with pytest.raises(BlockDirError, match="Block already exists"):
        block_dir.write_block(1001, data)
    assert block_dir.block_count == 1


def test_flush_writes_index(block_dir, store_dir):
    block_dir.write_block(1001, b"x")
    block_dir.flush()
    assert block_dir.block_count == 1
    assert block_dir.block_location(1001) == BlockLocation(1, 0, 1)
    raw = (store_dir / "blocks.index").read_bytes()
    assert len(raw) == 28
    assert raw[:8] == (1001).to_bytes(8, "little")


def test_persists_data_after_reopen(store_dir):
    data = b"Persistent block\0"
    with BlockDir(store_dir, 100) as bd:
        bd.write_block(1001, data)
        bd.flush()

    with BlockDir(store_dir, 100) as reopened:
        assert reopened.has_block(1001)
        assert reopened.file_count == 1
        assert reopened.read_block(1001, 256) == data


def test_read_non_existent_block_fails(block_dir):
    with pytest.raises(BlockDirError, match="not found"):
        block_dir.read_block(99999, 256)


def test_multiple_blocks(block_dir):
    block_dir.write_block(1001, b"Block #1\0")
    block_dir.write_block(1002, b"Block #2\0")
    block_dir.write_block(1003, b"Block #3\0")
    assert block_dir.has_block(1001)
    assert block_dir.has_block(1002)
    assert block_dir.has_block(1003)
    assert block_dir.read_block(1002) == b"Block #2\0"
    assert block_dir.file_count == 1


def test_rolls_over_to_new_file(block_dir, store_dir):
    block_dir.write_block(1, b"a" * 60)
    block_dir.write_block(2, b"b" * 60)
    assert block_dir.file_count == 2
    assert block_dir.block_location(1) == BlockLocation(1, 0, 60)
    assert block_dir.block_location(2) == BlockLocation(2, 0, 60)
    assert (store_dir / "block_000002.dat").exists()
    assert block_dir.read_block(2) == b"b" * 60


def test_new_blocks_continue_in_last_file_after_reopen(store_dir):
    with BlockDir(store_dir, 100) as bd:
        bd.write_block(1, b"a" * 60)
        bd.write_block(2, b"b" * 20)
    with BlockDir(store_dir, 100) as reopened:
        reopened.write_block(3, b"c" * 10)
        assert reopened.block_location(3) == BlockLocation(1, 80, 10)


def test_block_location_for_unknown_block(block_dir):
    assert block_dir.block_location(42) is None


def test_buffer_too_small(block_dir):
    block_dir.write_block(7, b"0123456789")
    with pytest.raises(BlockDirError, match="Buffer too small"):
        block_dir.read_block(7, 5)


def test_oversized_block_rejected(block_dir):
    with pytest.raises(BlockDirError, match="Failed to write block to file"):
        block_dir.write_block(1, b"z" * 101)
    assert not block_dir.has_block(1)


def test_has_correct_logger_name(block_dir):
    assert block_dir.log.name == "blockdir"