#!/usr/bin/env python
"""Command line interface printing the AWS Glacier SHA-256 tree hash of files.

With no file, or with "-", the standard input is hashed. Optionally the
per part checksums of a multipart upload are listed, and the results are
logged to a CSV file and indexed into ElasticSearch.
"""

import argparse
import logging
import sys
from datetime import datetime

from treehash import es_data_import
from treehash.config import Config
from treehash.errors import TreeHashError, IndexingError, ResultLogError
from treehash.multipart import split_parts, combine_part_hashes
from treehash.pylog import PyLog
from treehash.sha256_tree_hash import (
    BLOCK_SIZE,
    compute_sha256_tree_hash,
    drop_empty_tail,
    read_block_digests,
    stream_size,
    to_hex,
)

__author__ = "Emanuele Disco"
__copyright__ = "Copyright 2017"
__license__ = "GPL"
__version__ = "1.1.0"
__status__ = "Production"

STDIN_NAME = '-'

_logger = logging.getLogger(__name__)


def hash_stream(stream, name, config):
    """Print the tree hash of ``stream`` and return ``(checksum, size)``."""
    digests, tail_size = read_block_digests(stream, config.block_size)
    size = stream_size(digests, tail_size, config.block_size)
    chunks = drop_empty_tail(digests, tail_size)

    if config.part_size:
        parts = split_parts(chunks, size, config.part_size, config.block_size)
        for part in parts:
            print('%s  %s bytes %s-%s' % (to_hex(part.checksum), name, part.start, part.end))
        checksum = to_hex(combine_part_hashes(parts))
    else:
        checksum = to_hex(compute_sha256_tree_hash(chunks))

    _logger.debug('%s: %d bytes, %d block(s)', name, size, len(chunks))
    print('%s  %s' % (checksum, name))
    return checksum, size


def _record(name, size, checksum, config, output):
    if output is not None:
        output.log_result(name, size, checksum)
    if config.es_index:
        data = {
            "filename": name,
            "treehash": checksum,
            "size": size,
            "timestamp": datetime.now().strftime('%Y-%m-%dT%H:%M:%S.%f'),
        }
        response = es_data_import.post(config.es_index, config.es_type, data,
                                       host=config.es_host, port=config.es_port)
        _logger.debug('ES import response : %s', response.text)


def hash_file(filename, config, output=None):
    """Hash one file; return True on success."""
    try:
        f = open(filename, 'rb')
    except OSError as e:
        _logger.error('error: while opening file %s: %s', filename, e)
        return False

    try:
        with f:
            checksum, size = hash_stream(f, filename, config)
        _record(filename, size, checksum, config, output)
    except IndexingError as e:
        _logger.error('error: while indexing file %s: %s', filename, e)
        return False
    except ResultLogError as e:
        _logger.error('error: while logging result of file %s: %s', filename, e)
        return False
    except TreeHashError as e:
        _logger.error('error: while reading from file %s: %s', filename, e)
        return False
    return True


def hash_stdin(config, output=None, stdin=None):
    """Hash the standard input; return True on success."""
    stream = stdin if stdin is not None else sys.stdin.buffer
    try:
        checksum, size = hash_stream(stream, STDIN_NAME, config)
        _record(STDIN_NAME, size, checksum, config, output)
    except IndexingError as e:
        _logger.error('error: while indexing stdin: %s', e)
        return False
    except ResultLogError as e:
        _logger.error('error: while logging result of stdin: %s', e)
        return False
    except TreeHashError as e:
        _logger.error('error: while reading from stdin: %s', e)
        return False
    return True


def _build_parser():
    _parser = argparse.ArgumentParser(
        description='Print the AWS Glacier SHA-256 tree hash of each FILE.')
    _parser.add_argument('files', nargs='*', metavar='FILE',
                         help='files to hash, "-" or nothing for stdin')
    _parser.add_argument('-p', '--part-size', action='store', dest='part_size',
                         type=int, help='also print the checksum of every upload part')
    _parser.add_argument('-o', '--output-log', action='store', dest='output_log',
                         type=str, help='append the results to this CSV file')
    _parser.add_argument('--es-index', action='store', dest='es_index',
                         type=str, help='index the results into this ElasticSearch index')
    _parser.add_argument('--es-type', action='store', dest='es_type',
                         type=str, help='ElasticSearch document type')
    _parser.add_argument('-v', '--verbose', action='store_true',
                         dest='debug', help='verbose mode')
    return _parser


def main(argv=None, environ=None, stdin=None):
    _parser = _build_parser()
    _args = _parser.parse_args(argv)

    logging.basicConfig(format='%(asctime)s - %(levelname)s: %(message)s')
    logging.getLogger('treehash').setLevel(logging.DEBUG if _args.debug else logging.INFO)

    try:
        config = Config.from_env(environ)
        overrides = {k: v for k, v in (('part_size', _args.part_size),
                                        ('es_index', _args.es_index),
                                        ('es_type', _args.es_type)) if v is not None}
        config = config.replace(**overrides)
    except TreeHashError as e:
        _parser.error(str(e))

    if config.block_size != BLOCK_SIZE:
        _logger.warning('Block size is %d bytes instead of %d, checksums will not match Glacier',
                        config.block_size, BLOCK_SIZE)

    output = None
    if _args.output_log:
        try:
            output = PyLog(filename=_args.output_log, write_freq=1)
        except ResultLogError as e:
            _parser.error(str(e))

    ok = True
    try:
        if not _args.files:
            ok = hash_stdin(config, output, stdin)
        stdin_done = False
        for name in _args.files:
            if name == STDIN_NAME:
                if stdin_done:
                    _logger.warning('cannot read stdin twice, skipping!')
                    continue
                ok = hash_stdin(config, output, stdin) and ok
                stdin_done = True
            else:
                ok = hash_file(name, config, output) and ok
    finally:
        if output is not None:
            output.close()

    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
