"""Exceptions for the Questionnaire feature."""
from typing import Any, Dict, Optional

from chatbot.shared.exceptions import BookBotException


class QuestionnaireException(BookBotException):
    """Base exception for questionnaire operations."""

    pass


class AnswerMappingError(QuestionnaireException):
    """Raised when the collected answers do not line up with the recommendation fields."""

    def __init__(self, expected: int, received: int, details: Optional[Dict[str, Any]] = None):
        message = (
            f"Expected {expected} answers for the recommendation request, "
            f"got {received}; the question sequence no longer matches the field table"
        )
        error_details: Dict[str, Any] = {"expected": expected, "received": received}
        if details:
            error_details.update(details)
        super().__init__(message, "ANSWER_MAPPING_ERROR", error_details)
