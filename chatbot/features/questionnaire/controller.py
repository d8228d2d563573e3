"""Controller for the Questionnaire feature."""
from collections import deque
from typing import Callable, List, Optional

import structlog

from chatbot.features.questionnaire.entities import SessionState
from chatbot.features.questionnaire.events import (
    AnswerSubmitted,
    DraftChanged,
    Effect,
    Event,
    FetchQuestion,
    QuestionFailed,
    QuestionLoaded,
    RecommendationFailed,
    RecommendationLoaded,
    Restarted,
    ResultEvent,
    Started,
    SubmitRecommendation,
)
from chatbot.features.questionnaire.exceptions import AnswerMappingError
from chatbot.features.questionnaire.machine import is_stale, transition
from chatbot.features.questionnaire.mapping import build_recommendation_request
from chatbot.features.questionnaire.service import QuestionnaireService
from chatbot.shared.exceptions import BookBotException

logger = structlog.get_logger("bookbot.controller")

Performer = Callable[[Effect], ResultEvent]


class ConversationController:
    """Owns one session's state and performs the effects the state machine asks for.

    Effects run one after another, so at most one request is outstanding.
    Service failures are logged and turned into failure events; they never
    propagate to the caller.
    """

    def __init__(
        self,
        service: QuestionnaireService,
        state: Optional[SessionState] = None,
    ) -> None:
        self.service = service
        self.state = state or SessionState()

    def dispatch(self, event: Event) -> List[Effect]:
        """Apply a single event without performing any effect."""
        if is_stale(self.state, event):
            logger.info(
                "Discarding stale result",
                event_type=type(event).__name__,
                generation=getattr(event, "generation", None),
                current_generation=self.state.generation,
            )
        self.state, effects = transition(self.state, event)
        return effects

    def perform(self, effect: Effect) -> ResultEvent:
        """Perform one effect against the service and describe its outcome."""
        if isinstance(effect, FetchQuestion):
            logger.debug("Fetching question", index=effect.index, generation=effect.generation)
            try:
                response = self.service.get_question(effect.index)
            except BookBotException as e:
                logger.warning(
                    f"Question fetch failed: {e.message}",
                    index=effect.index,
                    error_code=e.error_code,
                )
                return QuestionFailed(
                    generation=effect.generation, index=effect.index, reason=e.error_code
                )
            return QuestionLoaded(
                generation=effect.generation, index=effect.index, response=response
            )

        if isinstance(effect, SubmitRecommendation):
            logger.debug("Requesting recommendation", generation=effect.generation)
            try:
                request = build_recommendation_request(effect.answers)
                response = self.service.recommend(request)
            except AnswerMappingError as e:
                logger.error(e.message, **e.details)
                return RecommendationFailed(generation=effect.generation, reason=e.error_code)
            except BookBotException as e:
                logger.warning(
                    f"Recommendation failed: {e.message}", error_code=e.error_code
                )
                return RecommendationFailed(generation=effect.generation, reason=e.error_code)
            logger.info("Recommendation received", generation=effect.generation)
            return RecommendationLoaded(generation=effect.generation, result=response.result)

        raise TypeError(f"Unsupported effect: {type(effect).__name__}")

    def run(self, event: Event, performer: Optional[Performer] = None) -> SessionState:
        """Dispatch `event` and keep performing effects until none are left."""
        perform = performer or self.perform
        pending = deque(self.dispatch(event))
        while pending:
            effect = pending.popleft()
            try:
                result = perform(effect)
            except BaseException:
                # An interrupted call still settles, so the session never stays loading.
                logger.warning("Effect interrupted", effect=type(effect).__name__)
                self.dispatch(self._failure_for(effect))
                raise
            pending.extend(self.dispatch(result))
        return self.state

    @staticmethod
    def _failure_for(effect: Effect) -> ResultEvent:
        if isinstance(effect, FetchQuestion):
            return QuestionFailed(generation=effect.generation, index=effect.index)
        return RecommendationFailed(generation=effect.generation)

    def start(self, performer: Optional[Performer] = None) -> SessionState:
        logger.info("Starting conversation")
        return self.run(Started(), performer)

    def restart(self, performer: Optional[Performer] = None) -> SessionState:
        logger.info("Restarting conversation", previous_generation=self.state.generation)
        return self.run(Restarted(), performer)

    def send(
        self, text: Optional[str] = None, performer: Optional[Performer] = None
    ) -> SessionState:
        """Submit `text`, or the current draft when omitted."""
        answer = self.state.draft if text is None else text
        return self.run(AnswerSubmitted(text=answer), performer)

    def set_draft(self, text: str) -> SessionState:
        self.dispatch(DraftChanged(text=text))
        return self.state
