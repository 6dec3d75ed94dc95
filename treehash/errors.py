class TreeHashError(Exception):
    """Base class for tree hash errors."""


class ReadFailure(TreeHashError):
    """The input stream failed with something other than end-of-stream."""


class AllocationFailure(TreeHashError):
    """The block buffer or digest state could not be allocated."""


class ConfigError(TreeHashError):
    pass


class IndexingError(TreeHashError):
    pass


class ResultLogError(TreeHashError):
    """The result log file could not be written."""
