"""Per part tree hashes for Glacier multipart uploads.

A part covers a power of two number of blocks, so the tree hashes of the
parts are nodes of the archive tree and reducing them gives the archive
tree hash.
"""

import logging
from collections import namedtuple

from treehash.errors import ConfigError
from treehash.sha256_tree_hash import (
    BLOCK_SIZE,
    check_block_size,
    compute_sha256_tree_hash,
    drop_empty_tail,
    read_block_digests,
    stream_size,
)

_logger = logging.getLogger(__name__)

# start and end are inclusive byte offsets, as in a "bytes start-end/*" range
Part = namedtuple('Part', ['index', 'start', 'end', 'checksum'])


def validate_part_size(part_size, block_size=BLOCK_SIZE):
    check_block_size(block_size)
    if isinstance(part_size, bool) or not isinstance(part_size, int) or part_size <= 0:
        raise ConfigError('Part size must be a positive integer, got %r' % (part_size,))
    blocks, rest = divmod(part_size, block_size)
    if rest or blocks & (blocks - 1):
        raise ConfigError('Part size %d is not a power of two multiple of %d'
                          % (part_size, block_size))
    return part_size


def split_parts(chunks, size, part_size, block_size=BLOCK_SIZE):
    """Group the block digests ``chunks`` of a ``size`` bytes stream into parts."""
    validate_part_size(part_size, block_size)
    blocks_per_part = part_size // block_size
    parts = []
    for index, i in enumerate(range(0, len(chunks), blocks_per_part)):
        start = index * part_size
        end = min(start + part_size, size) - 1
        checksum = compute_sha256_tree_hash(chunks[i:i + blocks_per_part])
        _logger.debug('Part %d: bytes %d-%d', index, start, end)
        parts.append(Part(index, start, end, checksum))
    return parts


def compute_part_hashes(stream, part_size, block_size=BLOCK_SIZE):
    """Read ``stream`` once and return the list of its parts."""
    validate_part_size(part_size, block_size)
    digests, tail_size = read_block_digests(stream, block_size)
    size = stream_size(digests, tail_size, block_size)
    return split_parts(drop_empty_tail(digests, tail_size), size, part_size, block_size)


def combine_part_hashes(parts):
    """Archive tree hash from the part checksums, in part order."""
    return compute_sha256_tree_hash([p.checksum for p in parts])
