"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings loaded from environment variables.

    Built once at startup and shared by reference; the model is frozen so
    request handlers can read it concurrently without synchronization.
    """

    # Listening socket
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)

    # Static asset fallback root
    static_dir: str = "./public"

    # Free-text label reported by the health probe
    environment: str = "development"

    # Logging
    log_level: str = "debug"

    # Maximum drain window in seconds; unset waits for in-flight requests indefinitely
    shutdown_timeout: float | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @property
    def dev_mode(self) -> bool:
        return self.environment.lower() == "development"
