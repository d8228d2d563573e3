"""DTOs for the Questionnaire feature (wire format of the remote service)."""
from typing import Optional

from pydantic import Field

from chatbot.shared.dtos import BaseDTO


class Question(BaseDTO):
    """A single question as served by the question endpoint."""

    q: str = Field(description="Question text")
    example: Optional[str] = Field(default=None, description="Example answer hint")

    def as_text(self) -> str:
        """Render the question the way the bot says it."""
        if self.example:
            return f"{self.q}\n({self.example})"
        return self.q


class QuestionResponse(BaseDTO):
    """Response of `GET /api/questions?index=N`."""

    completed: bool = Field(default=False, description="True once every question was asked")
    question: Optional[Question] = Field(default=None, description="Question at the index")

    @property
    def next_question(self) -> Optional[Question]:
        if self.completed or self.question is None:
            return None
        return self.question


class RecommendationRequest(BaseDTO):
    """Body of `POST /api/recommend-books`."""

    user_emotion: str = Field(description="How the user feels right now")
    desired_emotional_effect: str = Field(description="How the user wants to feel")
    occupation: str = Field(description="What the user does")
    reading_context: str = Field(description="Where and when the user reads")
    focus_level: str = Field(description="How much attention the user can give")


class RecommendationResponse(BaseDTO):
    """Response of the recommendation endpoint."""

    result: str = Field(description="Recommendation text to show the user")
