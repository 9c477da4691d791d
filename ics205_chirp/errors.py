"""Failure kinds raised by the conversion pipeline"""
from typing import List, Optional, Tuple


class ConversionError(Exception):
    """Base class; `reason` is a stable machine-readable code"""
    reason = "conversion_error"


class EmptyDocumentError(ConversionError):
    """PDF has no extractable text layer (scanned / image-only)"""
    reason = "empty_document"


class UnreadableDocumentError(ConversionError):
    """Buffer could not be parsed as a PDF at all"""
    reason = "unreadable_document"


class AIUnavailableError(ConversionError):
    """Backend not configured, or the remote call errored or timed out"""
    reason = "ai_unavailable"


class AIMalformedResponseError(ConversionError):
    """Model replied but no JSON array could be recovered"""
    reason = "ai_malformed_response"


class AIEmptyResultError(ConversionError):
    """Model replied with a valid but empty array"""
    reason = "ai_empty_result"


class NoFrequenciesFoundError(ConversionError):
    """Heuristic tier found nothing; no further fallback exists"""
    reason = "no_frequencies_found"


class ConfigurationError(ConversionError):
    """No AI backend is configured"""
    reason = "configuration_error"


class ConversionFailed(ConversionError):
    """
    Outward-facing failure of a whole conversion.

    Wraps the final, unrecoverable cause and keeps the list of
    (tier name, error) attempts made before giving up.
    """
    reason = "conversion_failed"

    def __init__(self, cause: ConversionError,
                 attempts: Optional[List[Tuple[str, ConversionError]]] = None):
        super().__init__(f"Failed to convert ICS-205: {cause}")
        self.cause = cause
        self.attempts = attempts or []

    @property
    def cause_reason(self) -> str:
        return self.cause.reason
