#!/usr/bin/env python
"""SHA-256 tree hash as computed by AWS Glacier.

The input is cut into 1 MiB blocks, every block is hashed on its own and
the block digests are combined pairwise, level after level, until a single
root digest is left. A digest without a partner on its level moves up
unchanged.
"""

import codecs
import hashlib
import io
import logging
import sys

from treehash.errors import ReadFailure, AllocationFailure, ConfigError

BLOCK_SIZE = 1048576
DIGEST_SIZE = 32

_logger = logging.getLogger(__name__)


def check_block_size(block_size):
    """Return ``block_size`` if it is a positive integer, raise ConfigError otherwise."""
    if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
        raise ConfigError('Block size must be a positive integer, got %r' % (block_size,))
    return block_size


def read_block_digests(stream, block_size=BLOCK_SIZE):
    """Hash ``stream`` block by block.

    Returns ``(digests, tail_size)``: one SHA-256 digest per window of
    ``block_size`` bytes, in stream order, and the number of bytes in the
    last window. The last window is finalized at end-of-stream even when it
    is empty, so ``tail_size == 0`` with more than one digest means the
    stream ended exactly on a block boundary.
    """
    check_block_size(block_size)
    try:
        buf = bytearray(block_size)
    except MemoryError as e:
        raise AllocationFailure('Cannot allocate a %d bytes block buffer' % block_size) from e
    view = memoryview(buf)

    digests = []
    sha256 = hashlib.sha256()
    filled = 0
    while True:
        try:
            n = stream.readinto(view[:block_size - filled])
        except OSError as e:
            raise ReadFailure(str(e)) from e
        if n is None:
            raise ReadFailure('Stream has no data available (non-blocking mode)')
        if n == 0:
            break
        sha256.update(view[:n])
        filled += n
        if filled == block_size:
            digests.append(sha256.digest())
            sha256 = hashlib.sha256()
            filled = 0

    digests.append(sha256.digest())
    view.release()
    _logger.debug('Hashed %d block(s), last block %d bytes', len(digests), filled)
    return digests, filled


def stream_size(digests, tail_size, block_size=BLOCK_SIZE):
    """Number of bytes read, from the digester output before tail correction."""
    return (len(digests) - 1) * block_size + tail_size


def drop_empty_tail(digests, tail_size):
    """Remove the digest of the empty window left by a block-aligned stream.

    A single digest is always kept: for an empty stream the digest of zero
    bytes is the answer.
    """
    if len(digests) > 1 and tail_size == 0:
        return digests[:-1]
    return digests


def get_chunks_sha256_hashes(stream, block_size=BLOCK_SIZE):
    """Return the block digests of ``stream`` ready to be reduced."""
    digests, tail_size = read_block_digests(stream, block_size)
    return drop_empty_tail(digests, tail_size)


def combine(left, right):
    sha256 = hashlib.sha256()
    sha256.update(left)
    sha256.update(right)
    return sha256.digest()


def reduce_level(level):
    """Compute the next level of the tree from ``level``.

    Adjacent pairs are combined left to right; on an odd length level the
    last digest is carried over as it is.
    """
    next_level = []
    for i in range(0, len(level), 2):
        if len(level) - i > 1:
            next_level.append(combine(level[i], level[i + 1]))
        else:
            next_level.append(level[i])
    return next_level


def tree_levels(chunks):
    """Yield every level of the tree, from the block digests up to the root."""
    if not chunks:
        raise ValueError('At least one digest is needed to build a tree')
    level = list(chunks)
    yield level
    while len(level) > 1:
        level = reduce_level(level)
        yield level


def compute_sha256_tree_hash(chunks):
    """Reduce the block digests ``chunks`` to the root digest."""
    for level in tree_levels(chunks):
        _logger.debug('Tree level with %d digest(s)', len(level))
    return level[0]


def tree_hash_stream(stream, block_size=BLOCK_SIZE):
    chunks = get_chunks_sha256_hashes(stream, block_size)
    return compute_sha256_tree_hash(chunks)


def tree_hash_file(filename, block_size=BLOCK_SIZE):
    """Tree hash of the file at ``filename``."""
    try:
        f = open(filename, 'rb')
    except OSError as e:
        raise ReadFailure('Cannot open %s: %s' % (filename, e)) from e
    with f:
        return tree_hash_stream(f, block_size)


def tree_hash_bytes(data, block_size=BLOCK_SIZE):
    return tree_hash_stream(io.BytesIO(data), block_size)


def to_hex(digest):
    return codecs.getencoder('hex')(digest)[0].decode('UTF-8')


def from_hex(checksum):
    return codecs.getdecoder('hex')(checksum)[0]


def _main():
    for f in sys.argv[1:]:
        print(to_hex(tree_hash_file(f)))


if __name__ == '__main__':
    _main()
