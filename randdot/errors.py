"""Error kinds surfaced by graph sampling and dot file writing.

Each kind also derives from the matching builtin exception so callers that
only know about ValueError/MemoryError/OSError still catch them.
"""


class RandDotError(Exception):
    """Base class for all randdot errors."""


class InvalidParameters(RandDotError, ValueError):
    """Raised when vertex/edge counts violate the constraint-specific bounds."""


class ResourceExhausted(RandDotError, MemoryError):
    """Raised when the adjacency relation cannot be allocated."""


class IoFailure(RandDotError, OSError):
    """Raised when the output file cannot be created, written, or closed."""
