"""Application settings loaded from the environment."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Every field can be overridden with a ``TASKBOARD_`` prefixed environment
    variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = "sqlite:///./taskboard.db"
    database_echo: bool = False

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Notification links are rendered as {prefix}/{project_id}/tasks/{task_id}
    notification_link_prefix: str = "/projects"
    deadline_days_ahead: int = 3
    # Seconds a live WebSocket push may take before the socket is dropped
    realtime_send_timeout: float = 5.0


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
