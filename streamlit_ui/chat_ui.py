import sys
from pathlib import Path
import streamlit as st

try:
    from core.settings import SETTINGS
except ModuleNotFoundError:
    ROOT = Path(__file__).resolve().parents[1]
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))
    from core.settings import SETTINGS

from chatbot.features.questionnaire.controller import ConversationController
from chatbot.features.questionnaire.entities import Sender
from core.logging import configure_logging
from streamlit_ui.background import background_performer, echoes_prompt
from di.container import create_container


st.set_page_config(page_title=SETTINGS.UI.PAGE_TITLE, layout="centered")
st.title(SETTINGS.UI.PAGE_TITLE)

API_BASE_URL = SETTINGS.API.API_BASE_URL
ENDPOINT_QUESTIONS = SETTINGS.API.ENDPOINT_QUESTIONS
ENDPOINT_RECOMMEND = SETTINGS.API.ENDPOINT_RECOMMEND

if "container" not in st.session_state:
    configure_logging(SETTINGS.APP.LOG_LEVEL, SETTINGS.APP.JSON_LOGS)
    st.session_state.container = create_container()


# One controller per browser session
if "controller" not in st.session_state:
    st.session_state.controller = (
        st.session_state.container.controllers.conversation_controller()
    )
    with st.spinner("Loading the first question..."):
        st.session_state.controller.start()

controller: ConversationController = st.session_state.controller

# Sidebar settings
with st.sidebar:
    st.subheader("Configuration")
    st.text(f"API_BASE_URL = {API_BASE_URL}")
    st.text(f"ENDPOINT_QUESTIONS = {ENDPOINT_QUESTIONS}")
    st.text(f"ENDPOINT_RECOMMEND = {ENDPOINT_RECOMMEND}")
    st.caption(
        "Values are loaded from environment (.env). Override by setting env vars."
    )

# Display chat history
for msg in controller.state.transcript:
    role = "user" if msg.sender is Sender.USER else "assistant"
    with st.chat_message(role):
        st.text(msg.text)

status_placeholder = st.empty()

if controller.state.show_restart:
    if st.button(SETTINGS.UI.RESTART_LABEL):
        controller.restart(performer=background_performer(controller, status_placeholder))
        st.rerun()
elif prompt := st.chat_input(
    SETTINGS.UI.INPUT_PLACEHOLDER, disabled=not controller.state.input_enabled
):
    if echoes_prompt(prompt, controller.state):
        with st.chat_message("user"):
            st.text(prompt)
    controller.send(prompt, performer=background_performer(controller, status_placeholder))
    st.rerun()

if controller.state.error_message:
    st.error(controller.state.error_message)
