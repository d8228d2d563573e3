"""Centralized dependency injection container."""
from typing import Iterator

import requests
import structlog
from dependency_injector import containers, providers

from core.settings import SETTINGS


logger = structlog.get_logger("bookbot")


def init_http_session() -> Iterator[requests.Session]:
    """HTTP session resource, closed on container shutdown."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    try:
        yield session
    finally:
        session.close()


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies."""

    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    http_session = providers.Resource(init_http_session)


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    config = providers.Configuration()
    infrastructure = providers.DependenciesContainer()

    questionnaire_service = providers.Factory(
        "chatbot.features.questionnaire.service.QuestionnaireService",
        session=infrastructure.http_session,
        base_url=config.API.API_BASE_URL,
        questions_endpoint=config.API.ENDPOINT_QUESTIONS,
        recommend_endpoint=config.API.ENDPOINT_RECOMMEND,
        timeout=config.API.REQUEST_TIMEOUT,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    # One controller per conversation session
    conversation_controller = providers.Factory(
        "chatbot.features.questionnaire.controller.ConversationController",
        service=services.questionnaire_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    config = providers.Configuration()

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(
        ServiceContainer, config=config, infrastructure=infrastructure
    )
    controllers = providers.Container(ControllerContainer, services=services)


def create_container() -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict(SETTINGS.model_dump())
    return container
