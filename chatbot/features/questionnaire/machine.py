"""Conversation state machine.

`transition` is a pure function: it never performs I/O. Remote calls are
returned as effects, and their outcomes come back as result events tagged
with the generation they were issued under. Results from an older generation
are dropped.
"""
from typing import Callable, Dict, List, Tuple, Type

from chatbot.features.questionnaire.entities import Message, Phase, SessionState
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
    Started,
    SubmitRecommendation,
)

FETCH_QUESTION_ERROR = "Failed to load the question."
ADVANCE_ERROR = "Failed to load the next question or the recommendation."
RECOMMENDATION_PLACEHOLDER = "Loading your book recommendation..."

Transition = Tuple[SessionState, List[Effect]]


def _start(state: SessionState, _event: Event) -> Transition:
    # Transcript stays on screen until the first question arrives.
    generation = state.generation + 1
    new_state = state.model_copy(
        update={
            "phase": Phase.AWAITING_FIRST_QUESTION,
            "current_index": 0,
            "answers": (),
            "draft": "",
            "error_message": None,
            "generation": generation,
            "placeholder_index": None,
        }
    )
    return new_state, [FetchQuestion(generation=generation, index=0)]


def _change_draft(state: SessionState, event: DraftChanged) -> Transition:
    return state.model_copy(update={"draft": event.text}), []


def _submit(state: SessionState, event: AnswerSubmitted) -> Transition:
    if state.phase is not Phase.IDLE or not event.text.strip():
        return state, []
    new_state = state.model_copy(
        update={
            "phase": Phase.SENDING,
            "transcript": state.transcript + (Message.user(event.text),),
            "answers": state.answers + (event.text,),
            "draft": "",
            "error_message": None,
        }
    )
    effect = FetchQuestion(generation=state.generation, index=state.current_index + 1)
    return new_state, [effect]


def _question_loaded(state: SessionState, event: QuestionLoaded) -> Transition:
    question = event.response.next_question

    if state.phase is Phase.AWAITING_FIRST_QUESTION and event.index == 0:
        transcript = (Message.bot(question.as_text()),) if question else ()
        return state.model_copy(update={"phase": Phase.IDLE, "transcript": transcript}), []

    if state.phase is Phase.SENDING and event.index == state.current_index + 1:
        if question is not None:
            new_state = state.model_copy(
                update={
                    "phase": Phase.IDLE,
                    "current_index": event.index,
                    "transcript": state.transcript + (Message.bot(question.as_text()),),
                }
            )
            return new_state, []

        new_state = state.model_copy(
            update={
                "phase": Phase.RECOMMENDING,
                "transcript": state.transcript + (Message.bot(RECOMMENDATION_PLACEHOLDER),),
                "placeholder_index": len(state.transcript),
            }
        )
        effect = SubmitRecommendation(generation=state.generation, answers=state.answers)
        return new_state, [effect]

    return state, []


def _question_failed(state: SessionState, event: QuestionFailed) -> Transition:
    if state.phase is Phase.AWAITING_FIRST_QUESTION and event.index == 0:
        new_state = state.model_copy(
            update={
                "phase": Phase.ERRORED,
                "transcript": (),
                "error_message": FETCH_QUESTION_ERROR,
            }
        )
        return new_state, []

    if state.phase is Phase.SENDING and event.index == state.current_index + 1:
        # The user message stays visible; the answer is withdrawn so the
        # next send answers the same question again.
        new_state = state.model_copy(
            update={
                "phase": Phase.IDLE,
                "answers": state.answers[:-1],
                "error_message": ADVANCE_ERROR,
            }
        )
        return new_state, []

    return state, []


def _recommendation_loaded(state: SessionState, event: RecommendationLoaded) -> Transition:
    if state.phase is not Phase.RECOMMENDING or state.placeholder_index is None:
        return state, []
    transcript = list(state.transcript)
    transcript[state.placeholder_index] = Message.bot(event.result)
    new_state = state.model_copy(
        update={
            "phase": Phase.COMPLETED,
            "transcript": tuple(transcript),
            "placeholder_index": None,
        }
    )
    return new_state, []


def _recommendation_failed(state: SessionState, event: RecommendationFailed) -> Transition:
    if state.phase is not Phase.RECOMMENDING or state.placeholder_index is None:
        return state, []
    index = state.placeholder_index
    new_state = state.model_copy(
        update={
            "phase": Phase.IDLE,
            "transcript": state.transcript[:index] + state.transcript[index + 1:],
            "answers": state.answers[:-1],
            "error_message": ADVANCE_ERROR,
            "placeholder_index": None,
        }
    )
    return new_state, []


_HANDLERS: Dict[Type, Callable[[SessionState, Event], Transition]] = {
    Started: _start,
    Restarted: _start,
    DraftChanged: _change_draft,
    AnswerSubmitted: _submit,
    QuestionLoaded: _question_loaded,
    QuestionFailed: _question_failed,
    RecommendationLoaded: _recommendation_loaded,
    RecommendationFailed: _recommendation_failed,
}


def is_stale(state: SessionState, event: Event) -> bool:
    """True for a result event issued under an older session generation."""
    generation = getattr(event, "generation", None)
    return generation is not None and generation != state.generation


def transition(state: SessionState, event: Event) -> Transition:
    """Apply one event and return the new state plus effects to perform."""
    if is_stale(state, event):
        return state, []
    try:
        handler = _HANDLERS[type(event)]
    except KeyError:
        raise TypeError(f"Unsupported event: {type(event).__name__}") from None
    return handler(state, event)
