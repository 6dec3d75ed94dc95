import hashlib
import io

import pytest

from treehash.errors import ConfigError
from treehash.multipart import (
    Part,
    combine_part_hashes,
    compute_part_hashes,
    split_parts,
    validate_part_size,
)
from treehash.sha256_tree_hash import tree_hash_bytes


@pytest.mark.parametrize('part_size', [16, 32, 64, 1024])
def test_valid_part_sizes(part_size):
    assert validate_part_size(part_size, block_size=16) == part_size


@pytest.mark.parametrize('part_size', [0, -16, 8, 24, 48, 17, '32'])
def test_invalid_part_sizes(part_size):
    with pytest.raises(ConfigError):
        validate_part_size(part_size, block_size=16)


def test_parts_cover_the_stream():
    data = bytes(range(100))
    parts = compute_part_hashes(io.BytesIO(data), part_size=32, block_size=16)
    assert [(p.index, p.start, p.end) for p in parts] == [
        (0, 0, 31), (1, 32, 63), (2, 64, 95), (3, 96, 99)]
    for p in parts:
        assert p.checksum == tree_hash_bytes(data[p.start:p.end + 1], block_size=16)


def test_aligned_stream_has_no_empty_part():
    data = b'q' * 64
    parts = compute_part_hashes(io.BytesIO(data), part_size=32, block_size=16)
    assert [(p.start, p.end) for p in parts] == [(0, 31), (32, 63)]


def test_empty_stream_single_part():
    parts = compute_part_hashes(io.BytesIO(b''), part_size=32, block_size=16)
    assert parts == [Part(0, 0, -1, hashlib.sha256(b'').digest())]


@pytest.mark.parametrize('size', [1, 16, 31, 32, 33, 160, 257])
def test_combined_parts_equal_archive_tree_hash(size):
    data = bytes(i % 251 for i in range(size))
    parts = compute_part_hashes(io.BytesIO(data), part_size=64, block_size=16)
    assert combine_part_hashes(parts) == tree_hash_bytes(data, block_size=16)


def test_split_parts_validates_part_size():
    with pytest.raises(ConfigError):
        split_parts([b'x' * 32], 10, part_size=48, block_size=16)
