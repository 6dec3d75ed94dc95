"""Compute the SHA-256 tree hash used by AWS Glacier."""

from treehash.errors import (
    TreeHashError,
    ReadFailure,
    AllocationFailure,
    ConfigError,
    IndexingError,
)
from treehash.sha256_tree_hash import (
    BLOCK_SIZE,
    DIGEST_SIZE,
    compute_sha256_tree_hash,
    get_chunks_sha256_hashes,
    tree_hash_bytes,
    tree_hash_file,
    tree_hash_stream,
    to_hex,
)

__version__ = "1.1.0"
