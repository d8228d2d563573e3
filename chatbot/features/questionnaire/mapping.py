"""Positional mapping between collected answers and recommendation fields.

The service asks its questions in a fixed order and the recommendation
endpoint expects named fields. The table below is the only place that ties
the two together.
"""
from typing import Dict, Sequence

from chatbot.features.questionnaire.dtos import RecommendationRequest
from chatbot.features.questionnaire.exceptions import AnswerMappingError

RECOMMENDATION_FIELDS: Dict[int, str] = {
    0: "user_emotion",
    1: "desired_emotional_effect",
    2: "occupation",
    3: "reading_context",
    4: "focus_level",
}


def build_recommendation_request(answers: Sequence[str]) -> RecommendationRequest:
    """Map answers onto the request body by position.

    Raises AnswerMappingError when the answer count differs from the table,
    so a changed question sequence never mislabels answers silently.
    """
    if len(answers) != len(RECOMMENDATION_FIELDS):
        raise AnswerMappingError(
            expected=len(RECOMMENDATION_FIELDS), received=len(answers)
        )
    payload = {field: answers[index] for index, field in RECOMMENDATION_FIELDS.items()}
    return RecommendationRequest(**payload)
