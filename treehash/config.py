"""Settings read from the environment once at startup."""

import os
from collections import namedtuple

from treehash.errors import ConfigError
from treehash.multipart import validate_part_size
from treehash.sha256_tree_hash import BLOCK_SIZE, check_block_size

_FIELDS = ['block_size', 'part_size', 'es_host', 'es_port', 'es_index', 'es_type']


class Config(namedtuple('Config', _FIELDS)):
    """Immutable settings; every instance has been validated."""

    __slots__ = ()

    def __new__(cls, block_size=BLOCK_SIZE, part_size=None, es_host='127.0.0.1',
                es_port='9200', es_index=None, es_type='archive'):
        check_block_size(block_size)
        if part_size is not None:
            validate_part_size(part_size, block_size)
        return super(Config, cls).__new__(cls, block_size, part_size, es_host,
                                          es_port, es_index, es_type)

    def replace(self, **kwargs):
        """Like _replace, but the new settings are validated too."""
        values = self._asdict()
        values.update(kwargs)
        return Config(**values)

    @classmethod
    def from_env(cls, environ=None):
        if environ is None:
            environ = os.environ
        part_size = environ.get('PART_SIZE')
        return cls(block_size=_to_int('TREEHASH_BLOCK_SIZE',
                                      environ.get('TREEHASH_BLOCK_SIZE', BLOCK_SIZE)),
                   part_size=_to_int('PART_SIZE', part_size) if part_size else None,
                   es_host=environ.get('ES_HOST', '127.0.0.1'),
                   es_port=environ.get('ES_PORT', '9200'),
                   es_index=environ.get('ES_INDEX') or None,
                   es_type=environ.get('ES_TYPE', 'archive'))


def _to_int(name, value):
    try:
        return int(value)
    except ValueError:
        raise ConfigError('%s must be an integer, got %r' % (name, value))
