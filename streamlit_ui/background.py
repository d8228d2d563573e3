"""Helpers the chat page uses to run effects off the script thread."""
import queue
import threading
import time

from chatbot.features.questionnaire.controller import ConversationController, Performer
from chatbot.features.questionnaire.entities import SessionState
from chatbot.features.questionnaire.events import Effect, FetchQuestion, ResultEvent


def status_text(effect: Effect) -> str:
    if isinstance(effect, FetchQuestion):
        return "Fetching the next question..."
    return "Finding books for you..."


def echoes_prompt(prompt: str, state: SessionState) -> bool:
    """Whether the page should draw the user's bubble before sending."""
    return bool(prompt.strip()) and state.input_enabled


def background_performer(
    controller: ConversationController, status_placeholder, poll_interval: float = 0.5
) -> Performer:
    """Run each effect in a worker thread while the status line animates."""

    def perform(effect: Effect) -> ResultEvent:
        result_queue = queue.Queue()

        def backend_task():
            try:
                result_queue.put(controller.perform(effect))
            except Exception as e:
                result_queue.put(e)

        thread = threading.Thread(target=backend_task, daemon=True)
        thread.start()
        spinner_chars = ["⏳", "⌛"]
        idx = 0
        try:
            while thread.is_alive():
                status_placeholder.info(
                    f"{status_text(effect)} {spinner_chars[idx % len(spinner_chars)]}"
                )
                time.sleep(poll_interval)
                idx += 1
            result = result_queue.get()
        finally:
            status_placeholder.empty()
        if isinstance(result, Exception):
            raise result
        return result

    return perform
