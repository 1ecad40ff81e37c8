"""Exception taxonomy shared by the analysis pipeline and the HTTP layer."""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .models import AttemptFailure


class AnalysisError(RuntimeError):
    """Base class for analysis failures."""


class InputValidationError(AnalysisError):
    """Raised when the submitted paper content cannot be analyzed."""


class AttemptError(AnalysisError):
    """Failure of a single model attempt; recovered inside the fallback loop."""

    reason = "transport"

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(AttemptError):
    """Timeout or network failure while talking to a model provider."""

    reason = "transport"


class RemoteServiceError(AttemptError):
    """The provider answered with a non-success status."""

    reason = "remote"


class MalformedResponseError(AttemptError):
    """Success status but the payload carries no usable content."""

    reason = "malformed"


class OutputTooShortError(AttemptError):
    """The model produced content below the minimum acceptable length."""

    reason = "too_short"


class AggregateFailure(AnalysisError):
    """Every model in the fallback chain failed."""

    def __init__(self, failures: Sequence["AttemptFailure"]) -> None:
        self.failures = list(failures)
        last = self.last_failure.error_message if self.last_failure else "Unknown error"
        super().__init__(f"Analysis failed with all models. Last error: {last}")

    @property
    def last_failure(self) -> Optional["AttemptFailure"]:
        return self.failures[-1] if self.failures else None


class DocumentExtractionError(Exception):
    """Base class for uploaded document problems."""

    status_code = 400


class UnreadableDocumentError(DocumentExtractionError):
    """The document is corrupt, mislabelled or password-protected."""

    status_code = 422


class UnsupportedDocumentTypeError(DocumentExtractionError):
    """The declared media type or extension is not accepted."""

    status_code = 415


class EmptyDocumentError(DocumentExtractionError):
    """Extraction succeeded but yielded no readable text."""

    status_code = 422


class DocumentTooLargeError(DocumentExtractionError):
    """The upload exceeds the configured size limit."""

    status_code = 413


__all__ = [
    "AggregateFailure",
    "AnalysisError",
    "AttemptError",
    "DocumentExtractionError",
    "DocumentTooLargeError",
    "EmptyDocumentError",
    "InputValidationError",
    "MalformedResponseError",
    "OutputTooShortError",
    "RemoteServiceError",
    "TransportError",
    "UnreadableDocumentError",
    "UnsupportedDocumentTypeError",
]
