"""
Configuration management for the advisor assistant.
Loads settings from environment variables and the project .env file.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from loguru import logger

# This file is at src/config/settings.py, so project root is 3 levels up
_project_root = Path(__file__).resolve().parent.parent.parent

PROJECT_ROOT = _project_root

_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file, override=False)
    logger.debug(f"Loaded .env from: {_env_file}")
else:
    logger.debug(f".env file not found at: {_env_file}, using process environment")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_project_root / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Provider Selection
    llm_provider: str = Field(default="openai")  # Options: "openai" | "ollama"

    # OpenAI (or any OpenAI-compatible endpoint)
    openai_api_key: str = Field(default="")
    openai_base_url: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")

    # Ollama
    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3")

    # Completion behaviour
    llm_temperature: float = Field(default=0.7)
    max_output_tokens: int = Field(default=4000)
    llm_timeout_seconds: float = Field(default=20.0)  # Whole completion call, no retries

    # Assistant persona
    assistant_name: str = Field(default="Atlas")
    max_history_messages: int = Field(default=20)  # Caller-supplied history cap

    # Data gathering limits
    greeting_task_limit: int = Field(default=3)  # Today's tasks shown for greeting/help
    greeting_review_limit: int = Field(default=2)  # Pending reviews shown for greeting/help
    general_task_limit: int = Field(default=5)  # Today's tasks shown for general questions
    expiring_window_days: int = Field(default=30)  # "Expiring soon" renewal window
    list_result_limit: int = Field(default=25)  # Max records per list in the prompt

    # Record store
    seed_data_path: str = Field(default="data/seed.json")

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="data/logs")
    log_to_file: bool = Field(default=False)

    # HTTP
    cors_origins: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path relative to the project root."""
        path = Path(value)
        if not path.is_absolute():
            path = _project_root / path
        return path


# Create global settings instance
settings = Settings()
