"""Shared exceptions for the book recommendation chatbot."""
from typing import Any, Dict, Optional


class BookBotException(Exception):
    """Base exception for the chatbot client."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ExternalServiceError(BookBotException):
    """Raised when a call to the question/recommendation service fails."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class MalformedResponseError(BookBotException):
    """Raised when the service answers with a body we cannot read."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"Malformed {service} response: {message}"
        super().__init__(full_message, "MALFORMED_RESPONSE", details)
