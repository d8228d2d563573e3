from typing import Dict, List, Optional

import pytest

from chatbot.features.questionnaire.controller import ConversationController
from chatbot.features.questionnaire.dtos import (
    Question,
    QuestionResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from chatbot.shared.exceptions import ExternalServiceError

QUESTIONS: List[Dict[str, Optional[str]]] = [
    {"q": "How do you feel?", "example": "happy/sad"},
    {"q": "How would you like to feel after reading?", "example": "calm, inspired"},
    {"q": "What do you do for a living?", "example": None},
    {"q": "Where do you usually read?", "example": "commute, bed"},
    {"q": "How focused can you be right now?", "example": "low/medium/high"},
]
RESULT = "Try 'The Little Prince' for a gentle lift."


class FakeQuestionnaireService:
    """In-memory stand-in for the remote question/recommendation service."""

    def __init__(self, questions=None, result=RESULT, fail_indexes=(), fail_recommend=False):
        self.questions = list(QUESTIONS if questions is None else questions)
        self.result = result
        self.fail_indexes = set(fail_indexes)
        self.fail_recommend = fail_recommend
        self.calls = []

    def get_question(self, index: int) -> QuestionResponse:
        self.calls.append(("get_question", index))
        if index in self.fail_indexes:
            raise ExternalServiceError("questions", "connection refused")
        if index < len(self.questions):
            return QuestionResponse(completed=False, question=Question(**self.questions[index]))
        return QuestionResponse(completed=True)

    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        self.calls.append(("recommend", request.model_dump()))
        if self.fail_recommend:
            raise ExternalServiceError("recommendation", "status 502: bad gateway")
        return RecommendationResponse(result=self.result)


@pytest.fixture
def service():
    return FakeQuestionnaireService()


@pytest.fixture
def controller(service):
    return ConversationController(service=service)


@pytest.fixture
def make_service():
    return FakeQuestionnaireService
