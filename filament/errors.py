"""Exceptions raised by the filament model and its drivers."""


class FilamentError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(FilamentError, ValueError):
    """Invalid model size, physical parameter or state shape."""


class DegenerateConfiguration(FilamentError, ArithmeticError):
    """
    The Gram matrix J J^T could not be factored.

    Happens when a segment has (near) zero length, e.g. two adjacent nodes
    coincide. Retrying at the same state cannot help, so callers should
    treat it as the end of the run.
    """

    def __init__(self, segment, pivot):
        self.segment = segment
        self.pivot = pivot
        super().__init__(
            f"Degenerate rod configuration: pivot {pivot!r} of the constraint "
            f"Gram matrix at segment {segment} is not positive."
        )
