"""Error taxonomy for split runs."""


class SplitError(Exception):
    """Base class for all errors raised by a split run."""


class ConfigurationError(SplitError):
    """The run cannot proceed with the requested parameters."""


class BoundaryNotFoundError(ConfigurationError):
    """No record boundary exists inside a full window before end of input.

    Raised when the configured chunk size is smaller than some record.
    """


class SizeParseError(ConfigurationError):
    """A size string could not be converted to a byte count."""


class SplitIOError(SplitError):
    """Reading, writing, seeking or syncing a file failed or came up short."""
