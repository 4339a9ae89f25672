"""Configuration settings for the application."""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pydantic settings class for the application."""

    # Define the settings with default values and types
    # These will be loaded from environment variables or a .env file if not provided
    API_PORT: int = 3001
    DEBUG: bool = False
    LOG_LEVEL: str = "info"  # Options: debug, info, warning, error, critical

    # LLM Configuration
    PROVIDER: str = "openai"  # Options: openai, anthropic
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_API_KEY: str | None = None
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"
    ROUTER_MODEL: str | None = None  # Defaults to the chat model

    # Agent loop
    MAX_ITERATIONS: int = 20

    # Skills and prompt (packaged defaults when unset)
    SKILLS_DIR: str | None = None
    SKILL_FOLDERS: List[str] | None = None
    SYSTEM_PROMPT_PATH: str | None = None

    # Connector credentials
    GOOGLE_ACCESS_TOKEN: str | None = None
    NOTION_API_KEY: str | None = None
    TELEGRAM_BOT_TOKEN: str | None = None

    # Tool behaviour
    BROWSER_HEADLESS: bool = True
    SHELL_TIMEOUT: float = 120.0

    class Config:
        """Configuration for Pydantic settings."""

        # Load environment variables from a .env file
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def model(self) -> str:
        """Chat model for the configured provider."""
        if self.PROVIDER.lower() == "anthropic":
            return self.ANTHROPIC_MODEL
        return self.OPENAI_MODEL


settings = Settings()
