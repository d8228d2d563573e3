"""HTTP transport for the question and recommendation endpoints."""
from typing import Any, Dict, Optional

import requests
import structlog
from pydantic import ValidationError

from chatbot.features.questionnaire.dtos import (
    QuestionResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from chatbot.shared.exceptions import ExternalServiceError, MalformedResponseError

logger = structlog.get_logger("bookbot.service")


class QuestionnaireService:
    """Thin client around the remote question/recommendation service."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        questions_endpoint: str = "/api/questions",
        recommend_endpoint: str = "/api/recommend-books",
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.questions_endpoint = questions_endpoint
        self.recommend_endpoint = recommend_endpoint
        self.timeout = timeout

    def get_question(self, index: int) -> QuestionResponse:
        """Fetch the question at `index`; `completed` is set past the last one."""
        url = f"{self.base_url}{self.questions_endpoint}"
        data = self._request("GET", url, service="questions", params={"index": index})
        try:
            return QuestionResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError("questions", str(e), {"url": url, "index": index})

    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        """Submit the five answers and return the recommendation text."""
        url = f"{self.base_url}{self.recommend_endpoint}"
        data = self._request(
            "POST", url, service="recommendation", json=request.model_dump()
        )
        try:
            return RecommendationResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError("recommendation", str(e), {"url": url})

    def _request(self, method: str, url: str, *, service: str, **kwargs: Any) -> Any:
        logger.debug("Calling service", method=method, url=url, service=service)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ExternalServiceError(service, f"failed to reach {url}: {e}", {"url": url})

        if not resp.ok:
            # Try extract detail
            try:
                payload = resp.json()
                detail = payload.get("detail") if isinstance(payload, dict) else payload
            except ValueError:
                detail = resp.text
            details: Dict[str, Any] = {"url": url, "status_code": resp.status_code}
            raise ExternalServiceError(
                service, f"status {resp.status_code}: {detail}", details
            )

        try:
            return resp.json()
        except ValueError:
            raise MalformedResponseError(service, "body is not valid JSON", {"url": url})
