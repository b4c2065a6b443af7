from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal, get_args
import pydantic

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS = get_args(LogLevel)


class Settings(BaseSettings):
    """
    Manages all runner settings.
    Reads from environment variables (and .env file).
    """

    # --- Task discovery ---
    TASKS_DIR: str = "tasks"
    DEFAULT_TASK_NAME: str = "default"

    @pydantic.computed_field
    @property
    def TASKS_PATH(self) -> Path:
        """
        Absolute path of the task-module directory.
        """
        return Path(self.TASKS_DIR).expanduser().resolve()

    # --- Local host scheduler ---
    MAX_WORKERS: int = pydantic.Field(default=8, ge=1)

    # --- Logging ---
    LOG_LEVEL: LogLevel = "INFO"

    @pydantic.field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    # --- Help listing layout ---
    HELP_NAME_WIDTH: int = pydantic.Field(default=20, ge=1)
    HELP_MARGIN: int = pydantic.Field(default=2, ge=0)

    # Pydantic-Settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the Settings object.
    Using @lru_cache ensures the .env file is read only once.
    """
    return Settings()

# Create a single, globally accessible settings instance
settings = get_settings()
