import pytest

from ppledger.blockfile import BlockFile, BlockFileError

MAX_SIZE = 1024 * 1024


@pytest.fixture
def block_path(tmp_path):
    return tmp_path / "test_block.dat"


@pytest.fixture
def block_file(block_path):
    bf = BlockFile(block_path, MAX_SIZE)
    yield bf
    bf.close()


def test_initializes_successfully(block_file, block_path):
    assert block_file.is_open()
    assert block_path.exists()
    assert block_file.current_size == 0
    assert block_file.max_size == MAX_SIZE


def test_writes_data(block_file):
    data = b"Hello, BlockFile!\0"
    offset = block_file.write(data)
    assert offset >= 0
    assert block_file.current_size == len(data)


def test_reads_data_back(block_file):
    data = b"Hello, BlockFile!\0"
    offset = block_file.write(data)
    assert block_file.read(offset, len(data)) == data


def test_multiple_writes(block_file):
    data1 = b"First block\0"
    data2 = b"Second block\0"
    offset1 = block_file.write(data1)
    offset2 = block_file.write(data2)
    assert offset1 != offset2
    assert offset1 == 0
    assert offset2 == len(data1)
    assert block_file.read(offset2, len(data2)) == data2


def test_can_fit_returns_false_for_oversized_data(block_file):
    assert not block_file.can_fit(2 * 1024 * 1024)
    assert block_file.can_fit(MAX_SIZE)


def test_flush_succeeds(block_file, block_path):
    offset = block_file.write(b"flushed")
    block_file.flush()
    assert offset == 0
    assert block_file.read(0, 7) == b"flushed"
    assert block_path.read_bytes() == b"flushed"


def test_reopens_persistent_file(block_path):
    data = b"Persistent data\0"
    bf = BlockFile(block_path, MAX_SIZE)
    offset = bf.write(data)
    bf.close()

    with BlockFile(block_path, MAX_SIZE) as reopened:
        assert reopened.current_size == len(data)
        assert reopened.read(offset, len(data)) == data


def test_write_beyond_limit_raises(tmp_path):
    with BlockFile(tmp_path / "small.dat", 10) as bf:
        bf.write(b"12345678")
        with pytest.raises(BlockFileError, match="Cannot fit 3 bytes"):
            bf.write(b"abc")
        assert bf.current_size == 8


def test_short_read_returns_available_bytes(block_file):
    block_file.write(b"abc")
    assert block_file.read(1, 10) == b"bc"


def test_negative_offset_raises(block_file):
    with pytest.raises(BlockFileError):
        block_file.read(-1, 4)


def test_operations_after_close_raise(block_file):
    block_file.close()
    assert not block_file.is_open()
    with pytest.raises(BlockFileError, match="File is not open"):
        block_file.write(b"x")
    with pytest.raises(BlockFileError, match="File is not open"):
        block_file.read(0, 1)


def test_missing_directory_raises(tmp_path):
    with pytest.raises(BlockFileError, match="Failed to open file"):
        BlockFile(tmp_path / "missing" / "block.dat", MAX_SIZE)


def test_has_correct_logger_name(block_file):
    assert block_file.log.name == "blockfile"