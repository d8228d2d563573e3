"""Events consumed by the conversation state machine and effects it emits.

Effects describe the remote call to make; the controller performs it and
feeds the outcome back as a result event carrying the same generation.
"""
from typing import Tuple, Union

from pydantic import ConfigDict, Field

from chatbot.features.questionnaire.dtos import QuestionResponse
from chatbot.shared.dtos import BaseDTO


class _Frozen(BaseDTO):
    model_config = ConfigDict(frozen=True)


# User/UI events
class Started(_Frozen):
    """The chat surface was mounted."""


class Restarted(_Frozen):
    """The user asked to start over."""


class DraftChanged(_Frozen):
    text: str = Field(description="Current content of the input box")


class AnswerSubmitted(_Frozen):
    text: str = Field(description="Raw text the user sent")


# Result events
class QuestionLoaded(_Frozen):
    generation: int
    index: int
    response: QuestionResponse


class QuestionFailed(_Frozen):
    generation: int
    index: int
    reason: str = Field(default="", description="Error code of the failure")


class RecommendationLoaded(_Frozen):
    generation: int
    result: str


class RecommendationFailed(_Frozen):
    generation: int
    reason: str = Field(default="", description="Error code of the failure")


# Effects
class FetchQuestion(_Frozen):
    generation: int
    index: int = Field(ge=0)


class SubmitRecommendation(_Frozen):
    generation: int
    answers: Tuple[str, ...]


Event = Union[
    Started,
    Restarted,
    DraftChanged,
    AnswerSubmitted,
    QuestionLoaded,
    QuestionFailed,
    RecommendationLoaded,
    RecommendationFailed,
]
ResultEvent = Union[QuestionLoaded, QuestionFailed, RecommendationLoaded, RecommendationFailed]
Effect = Union[FetchQuestion, SubmitRecommendation]
