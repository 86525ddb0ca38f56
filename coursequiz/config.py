"""
Configuration settings for coursequiz.

Uses Pydantic Settings for environment variable management with .env file support.
Nested values use a double underscore, e.g. ``COURSEQUIZ_API__BASE_URL``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseModel):
    """Connection settings for the course platform REST backend."""

    base_url: str = "http://localhost:3000/api"
    # None disables the HTTP timeout entirely
    http_timeout_seconds: float | None = None

    # Endpoints
    activities_endpoint: str = "/atividades"
    submissions_endpoint: str = "/progresso"
    current_user_endpoint: str = "/usuarios/me"
    login_endpoint: str = "/auth/login"
    register_endpoint: str = "/auth/registrar"
    courses_endpoint: str = "/cursos"
    modules_endpoint: str = "/modulos"
    users_endpoint: str = "/usuarios"


class AttemptConfig(BaseModel):
    """Bounds applied by the assessment engine around load and submit."""

    load_timeout_seconds: float | None = Field(
        default=None,
        description="Give up on loading an activity after this many seconds",
    )
    submit_timeout_seconds: float | None = Field(
        default=None,
        description="Give up on a submission after this many seconds",
    )


class CourseQuizConfig(BaseSettings):
    """
    Main configuration for coursequiz.

    Configuration precedence:
    1. Environment variables (COURSEQUIZ_*)
    2. .env file in the working directory
    3. Defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="COURSEQUIZ_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api: ApiConfig = Field(default_factory=ApiConfig)
    attempt: AttemptConfig = Field(default_factory=AttemptConfig)

    log_level: str = "WARNING"
    data_dir: Path = Path.home() / ".coursequiz"

    @property
    def session_file(self) -> Path:
        """Where the login session is stored."""
        return self.data_dir / "session.json"


@lru_cache(maxsize=1)
def get_settings() -> CourseQuizConfig:
    """Get cached settings instance."""
    return CourseQuizConfig()
