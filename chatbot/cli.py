#!/usr/bin/env python3
"""Terminal front end for the book recommendation chatbot."""
import argparse
import sys
from typing import Callable, List, Optional

from chatbot.features.questionnaire.controller import ConversationController
from chatbot.features.questionnaire.entities import SessionState, Sender
from core.logging import configure_logging
from core.settings import SETTINGS
from di.container import create_container

RESTART_COMMAND = "/restart"
QUIT_COMMAND = "/quit"


def _show_new(state: SessionState, shown: int, write: Callable[[str], None]) -> int:
    """Print bot messages added since `shown` and return the new count."""
    for msg in state.transcript[shown:]:
        if msg.sender is Sender.BOT:
            write(f"bot> {msg.text}")
    if state.error_message:
        write(f"! {state.error_message}")
    return len(state.transcript)


def run_chat(
    controller: ConversationController,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    state = controller.start()
    shown = _show_new(state, 0, write)

    while True:
        try:
            if state.show_restart:
                reply = read("Start over? [y/N] ").strip().lower()
                if reply not in ("y", "yes"):
                    return 0
                line = RESTART_COMMAND
            else:
                line = read("you> ")
        except EOFError:
            return 0

        command = line.strip()
        if command == QUIT_COMMAND:
            return 0
        if command == RESTART_COMMAND:
            state = controller.restart()
            shown = _show_new(state, 0, write)
            continue

        state = controller.send(line)
        shown = _show_new(state, min(shown, len(state.transcript)), write)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Chat your way to a book recommendation.")
    ap.add_argument("--base-url", default=None, help="Question/recommendation service base URL")
    ap.add_argument("--log-level", default=SETTINGS.APP.LOG_LEVEL)
    ap.add_argument("--json-logs", action="store_true", default=SETTINGS.APP.JSON_LOGS)
    args = ap.parse_args(argv)

    configure_logging(args.log_level, args.json_logs)

    container = create_container()
    if args.base_url:
        container.config.API.API_BASE_URL.from_value(args.base_url)
    container.init_resources()
    try:
        return run_chat(container.controllers.conversation_controller())
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    sys.exit(main())
