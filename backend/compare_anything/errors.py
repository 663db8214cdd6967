"""
CompareAnything Backend — Error Taxonomy

Every failure that reaches a request boundary is a CompareError subclass.
The exception handler in main.py turns it into {"error": ..., "error_code": ...}.
Storage write failures are not raised: see db.PersistFailed.
"""

from __future__ import annotations


class CompareError(Exception):
    """Base class for failures surfaced to the API caller.

    Parameters
    ----------
    message:
        Human-readable message returned in the response body.
    error_code:
        Reference code shared between the log line and the response.
    """

    status_code: int = 500
    default_message: str = "Something went wrong while comparing."

    def __init__(self, message: str | None = None, *, error_code: str | None = None) -> None:
        self.message = message or self.default_message
        self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize the error into a JSON-friendly dictionary."""
        data = {"error": self.message}
        if self.error_code is not None:
            data["error_code"] = self.error_code
        return data


class InvalidInput(CompareError):
    """itemA or itemB missing, empty or whitespace-only."""

    status_code = 400
    default_message = "Both items are required"


class EmptyCompletion(CompareError):
    """The completion service returned no text."""

    default_message = "Empty response from AI."


class UnparsableCompletion(CompareError):
    """The completion text was not JSON in the ComparisonResult shape."""

    default_message = "AI response could not be parsed. Try again with simpler descriptions."

    def __init__(self, message: str | None = None, *, error_code: str | None = None, reason: str = "") -> None:
        super().__init__(message, error_code=error_code)
        self.reason = reason


class UpstreamFailure(CompareError):
    """The completion call itself failed (network, auth, rate limit, timeout)."""

    status_code = 502


class StorageReadFailure(CompareError):
    """A read query against the comparisons table failed."""

    default_message = "Failed to load comparisons."
