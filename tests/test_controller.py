import pytest

from chatbot.features.questionnaire.controller import ConversationController
from chatbot.features.questionnaire.entities import Message, Phase, Sender
from chatbot.features.questionnaire.events import (
    AnswerSubmitted,
    FetchQuestion,
    QuestionLoaded,
)
from chatbot.features.questionnaire.machine import (
    ADVANCE_ERROR,
    FETCH_QUESTION_ERROR,
)

ANSWERS = ["A", "B", "C", "D", "E"]


def complete_session(controller):
    controller.start()
    for answer in ANSWERS:
        controller.send(answer)
    return controller.state


def test_full_session_alternates_and_ends_with_result(controller, service):
    state = complete_session(controller)

    assert len(state.transcript) == 11
    senders = [m.sender for m in state.transcript]
    assert senders == [Sender.BOT, Sender.USER] * 5 + [Sender.BOT]
    assert [m.text for m in state.transcript if m.sender is Sender.USER] == ANSWERS
    assert state.transcript[-1] == Message.bot(service.result)
    assert state.phase is Phase.COMPLETED
    assert state.show_restart


def test_recommendation_body_uses_positional_fields(controller, service):
    complete_session(controller)

    assert service.calls[-1] == (
        "recommend",
        {
            "user_emotion": "A",
            "desired_emotional_effect": "B",
            "occupation": "C",
            "reading_context": "D",
            "focus_level": "E",
        },
    )


def test_question_indexes_follow_progress(controller, service):
    complete_session(controller)

    indexes = [index for name, index in service.calls if name == "get_question"]
    assert indexes == [0, 1, 2, 3, 4, 5]


def test_restart_reproduces_initial_transcript(controller):
    initial = controller.start().transcript
    for answer in ANSWERS:
        controller.send(answer)

    state = controller.restart()

    assert state.transcript == initial
    assert state.answers == ()
    assert state.current_index == 0
    assert state.phase is Phase.IDLE


def test_first_question_scenario(controller):
    state = controller.start()

    assert state.transcript == (Message.bot("How do you feel?\n(happy/sad)"),)


def test_initial_failure_sets_fetch_error(make_service):
    controller = ConversationController(service=make_service(fail_indexes={0}))

    state = controller.start()

    assert state.transcript == ()
    assert state.error_message == FETCH_QUESTION_ERROR


def test_restart_failure_empties_transcript(make_service):
    service = make_service()
    controller = ConversationController(service=service)
    controller.start()
    controller.send("A")
    service.fail_indexes.add(0)

    state = controller.restart()

    assert state.transcript == ()
    assert state.error_message == FETCH_QUESTION_ERROR


def test_whitespace_send_never_advances(controller, service):
    controller.start()
    calls_before = list(service.calls)

    state = controller.send("   ")

    assert state.current_index == 0
    assert [m for m in state.transcript if m.sender is Sender.USER] == []
    assert service.calls == calls_before


def test_send_while_loading_is_a_no_op(controller):
    controller.start()
    effects = controller.dispatch(AnswerSubmitted(text="A"))
    assert effects == [FetchQuestion(generation=1, index=1)]
    snapshot = controller.state

    assert controller.dispatch(AnswerSubmitted(text="B")) == []
    assert controller.state == snapshot
    assert controller.state.answers == ("A",)


def test_send_uses_draft_when_text_omitted(controller):
    controller.start()
    controller.set_draft("curious")

    state = controller.send()

    assert state.answers == ("curious",)
    assert state.draft == ""


def test_advance_failure_can_be_retried(make_service):
    service = make_service(fail_indexes={1})
    controller = ConversationController(service=service)
    controller.start()

    state = controller.send("A")
    assert state.error_message == ADVANCE_ERROR
    assert state.answers == ()

    service.fail_indexes.clear()
    state = controller.send("A again")

    assert state.error_message is None
    assert state.answers == ("A again",)
    assert state.current_index == 1
    assert state.transcript[-1] == Message.bot("How would you like to feel after reading?\n(calm, inspired)")


def test_recommendation_failure_then_retry(make_service):
    service = make_service(fail_recommend=True)
    controller = ConversationController(service=service)
    state = complete_session(controller)

    assert state.error_message == ADVANCE_ERROR
    assert state.phase is Phase.IDLE
    assert state.transcript[-1] == Message.user("E")
    assert len(state.answers) == 4

    service.fail_recommend = False
    state = controller.send("E")

    assert state.phase is Phase.COMPLETED
    assert state.transcript[-1] == Message.bot(service.result)


def test_changed_question_count_fails_loudly(make_service):
    service = make_service(
        questions=[{"q": "Only one?", "example": None}]
    )
    controller = ConversationController(service=service)
    controller.start()

    state = controller.send("yes")

    assert state.error_message == ADVANCE_ERROR
    assert all(name != "recommend" for name, _ in service.calls)


def test_stale_response_after_restart_is_dropped(controller):
    controller.start()
    controller.dispatch(AnswerSubmitted(text="A"))
    controller.restart()
    restarted = controller.state

    late = controller.perform(FetchQuestion(generation=1, index=1))
    assert isinstance(late, QuestionLoaded)
    controller.dispatch(late)

    assert controller.state == restarted


def test_custom_performer_receives_every_effect(controller, service):
    seen = []

    def performer(effect):
        seen.append(effect)
        return controller.perform(effect)

    controller.start(performer=performer)
    controller.send("A", performer=performer)

    assert seen == [FetchQuestion(generation=1, index=0), FetchQuestion(generation=1, index=1)]


class Interrupted(BaseException):
    pass


def interrupting_performer(effect):
    raise Interrupted()


def test_interrupted_send_settles_back_to_idle(controller):
    controller.start()

    with pytest.raises(Interrupted):
        controller.send("A", performer=interrupting_performer)

    state = controller.state
    assert state.phase is Phase.IDLE
    assert state.input_enabled
    assert state.error_message == ADVANCE_ERROR
    assert state.answers == ()


def test_interrupted_recommendation_removes_placeholder(controller):
    controller.start()
    for answer in ANSWERS[:4]:
        controller.send(answer)

    def performer(effect):
        if isinstance(effect, FetchQuestion):
            return controller.perform(effect)
        raise Interrupted()

    with pytest.raises(Interrupted):
        controller.send("E", performer=performer)

    state = controller.state
    assert state.phase is Phase.IDLE
    assert state.transcript[-1] == Message.user("E")
    assert len(state.answers) == 4


def test_interrupted_start_offers_restart(controller):
    with pytest.raises(Interrupted):
        controller.start(performer=interrupting_performer)

    state = controller.state
    assert state.phase is Phase.ERRORED
    assert state.show_restart
    assert state.error_message == FETCH_QUESTION_ERROR
    assert controller.restart().phase is Phase.IDLE
