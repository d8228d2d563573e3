from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)


class ApiSettings(CustomSettings):
    """Where the question/recommendation service lives.

    Set via env vars:
    - API_BASE_URL
    - ENDPOINT_QUESTIONS
    - ENDPOINT_RECOMMEND
    - REQUEST_TIMEOUT (seconds; unset leaves the transport default)
    """

    API_BASE_URL: str = Field(default="http://localhost:8000")
    ENDPOINT_QUESTIONS: str = Field(default="/api/questions")
    ENDPOINT_RECOMMEND: str = Field(default="/api/recommend-books")
    REQUEST_TIMEOUT: Optional[float] = Field(default=None)

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class UiSettings(CustomSettings):
    """Labels for the rendering surfaces."""

    PAGE_TITLE: str = Field(default="Emotion-based Book Recommendation Chatbot")
    INPUT_PLACEHOLDER: str = Field(default="Type your answer")
    RESTART_LABEL: str = Field(default="Start over")


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    API: ApiSettings = Field(default_factory=ApiSettings)
    UI: UiSettings = Field(default_factory=UiSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
