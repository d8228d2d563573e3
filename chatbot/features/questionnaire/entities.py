"""Conversation entities: messages and the controller's session state."""
from enum import Enum
from typing import Optional, Tuple

from pydantic import ConfigDict, Field

from chatbot.shared.dtos import BaseDTO


class Sender(str, Enum):
    """Who authored a transcript message."""
    BOT = "bot"
    USER = "user"


class Phase(str, Enum):
    """Conversation state machine phases."""
    AWAITING_FIRST_QUESTION = "awaiting_first_question"
    IDLE = "idle"
    SENDING = "sending"
    RECOMMENDING = "recommending"
    COMPLETED = "completed"
    ERRORED = "errored"


class Message(BaseDTO):
    """A single chat bubble."""

    model_config = ConfigDict(frozen=True)

    sender: Sender = Field(description="Message author")
    text: str = Field(description="Message text")

    @classmethod
    def bot(cls, text: str) -> "Message":
        return cls(sender=Sender.BOT, text=text)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(sender=Sender.USER, text=text)


class SessionState(BaseDTO):
    """Immutable snapshot of one conversation session.

    `generation` identifies the session a pending request belongs to; it is
    bumped on every start and restart. `placeholder_index` points at the
    transient "loading" message while a recommendation is outstanding.
    """

    model_config = ConfigDict(frozen=True)

    phase: Phase = Field(default=Phase.AWAITING_FIRST_QUESTION)
    current_index: int = Field(default=0, ge=0)
    answers: Tuple[str, ...] = Field(default=())
    transcript: Tuple[Message, ...] = Field(default=())
    draft: str = Field(default="")
    error_message: Optional[str] = Field(default=None)
    generation: int = Field(default=0, ge=0)
    placeholder_index: Optional[int] = Field(default=None)

    @property
    def is_loading(self) -> bool:
        return self.phase in (
            Phase.AWAITING_FIRST_QUESTION,
            Phase.SENDING,
            Phase.RECOMMENDING,
        )

    @property
    def is_completed(self) -> bool:
        return self.phase is Phase.COMPLETED

    @property
    def input_enabled(self) -> bool:
        return self.phase is Phase.IDLE

    @property
    def show_restart(self) -> bool:
        """Whether the restart control replaces the input box."""
        return self.phase in (Phase.RECOMMENDING, Phase.COMPLETED, Phase.ERRORED)
