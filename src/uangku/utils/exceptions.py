"""Custom exception classes for UangKu."""


class UangkuError(Exception):
    """Base exception for UangKu."""
    pass


class ConfigError(UangkuError):
    """Configuration-related errors."""
    pass


class StorageError(UangkuError):
    """Local transaction store errors."""
    pass


# Extraction pipeline errors
class ExtractionError(UangkuError):
    """Base class for any failure while turning raw input into a record."""
    pass


class InvalidInputError(ExtractionError):
    """Neither text nor attachment was supplied."""
    pass


class UnreadableAttachmentError(ExtractionError):
    """Attachment bytes or media type could not be read."""
    pass


class GatewayError(ExtractionError):
    """Generation service call failed."""
    pass


class MissingCredentialsError(GatewayError):
    """No API key configured for the generation service."""
    pass


class ServiceError(GatewayError):
    """Generation service returned an error or an empty response."""
    pass


class GatewayTimeout(GatewayError):
    """Generation service did not answer in time."""
    pass


Timeout = GatewayTimeout


class MalformedResponseError(ExtractionError):
    """Model output is not a single JSON object."""
    pass


class SchemaViolationError(ExtractionError):
    """Candidate record cannot be repaired into a valid transaction."""
    pass


class InsightsUnavailableError(UangkuError):
    """Insights could not be generated."""
    pass
