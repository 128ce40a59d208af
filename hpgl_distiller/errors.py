"""Exception hierarchy shared by the distiller and its command-line glue.

Each fatal condition carries the process exit code the CLI reports it
with, so ``scripts.distill`` never has to map exception types by hand.
"""

from __future__ import annotations


class DistillerError(Exception):
    """Base class for all fatal distiller errors."""

    exit_code: int = 1


class ConfigError(DistillerError):
    """Raised when configuration is missing or fails validation."""

    exit_code = 1


class InputAllocationError(DistillerError):
    """Raised when the input document cannot be held in memory."""

    exit_code = 2


class InputOpenError(DistillerError):
    """Raised when the input document cannot be opened or stat'ed."""

    exit_code = 3


class OutputOpenError(DistillerError):
    """Raised when the output sink cannot be opened for writing."""

    exit_code = 4


class ShortReadError(DistillerError):
    """Raised when fewer bytes were read than the file declares.

    A truncated read is treated as a corrupt document, never retried.
    """

    exit_code = 5

    def __init__(self, path: str, expected: int, actual: int) -> None:
        super().__init__(
            f"File size ({expected} bytes) and the size of the data read "
            f"({actual} bytes) do not match: {path}"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class OutputWriteError(DistillerError):
    """Raised when writing to an already opened output sink fails."""

    exit_code = 6
