"""Exception types raised by the integrity analysis engine."""

from typing import Optional


class IntegrityError(Exception):
    """Base class for all engine errors."""


class InputError(IntegrityError):
    """The submitted text cannot be analyzed. Propagates to the caller."""


class EmptyInputError(InputError):
    """Text is empty or whitespace-only."""


class InputTooShortError(InputError):
    """Text is below the minimum length for an operation."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Text too short for meaningful analysis: {length} characters (minimum {minimum})"
        )


class DimensionMismatchError(IntegrityError):
    """Two vectors cannot be compared."""


class MalformedCorpusEntryError(IntegrityError):
    """A corpus record carries an unusable stored embedding."""

    def __init__(self, source_id, message: str):
        self.source_id = source_id
        super().__init__(f"Source {source_id}: {message}")


class ProviderUnavailableError(IntegrityError):
    """
    The external embedding or language-model provider failed.

    ``reason`` is one of: quota, auth, rate_limit, timeout, connection, api_error.
    """

    def __init__(self, reason: str, message: str, status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        super().__init__(message)


class InvalidModelResponseError(IntegrityError):
    """The language model returned non-JSON or incomplete output."""
