"""Utility modules."""
from .logger import get_logger, configure_logging, set_session_context
from .exceptions import (
    UangkuError,
    ConfigError,
    StorageError,
    ExtractionError,
    InvalidInputError,
    UnreadableAttachmentError,
    GatewayError,
    MissingCredentialsError,
    ServiceError,
    GatewayTimeout,
    Timeout,
    MalformedResponseError,
    SchemaViolationError,
    InsightsUnavailableError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_session_context",
    "UangkuError",
    "ConfigError",
    "StorageError",
    "ExtractionError",
    "InvalidInputError",
    "UnreadableAttachmentError",
    "GatewayError",
    "MissingCredentialsError",
    "ServiceError",
    "GatewayTimeout",
    "Timeout",
    "MalformedResponseError",
    "SchemaViolationError",
    "InsightsUnavailableError"
]
