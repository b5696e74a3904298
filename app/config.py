"""
Configuration settings for the guide generator backend.
Loads environment variables and provides application-wide settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/guides.db"

    # Anthropic Configuration
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_API_VERSION: str = "2023-06-01"
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    LLM_TIMEOUT: int = 120  # seconds per LLM request

    # Output budgets per generation step (tokens)
    OUTLINE_MAX_TOKENS: int = 1000
    TITLE_MAX_TOKENS: int = 100
    CONTENT_MAX_TOKENS: int = 4000
    EDIT_MAX_TOKENS: int = 4000

    # Brave Search Configuration
    BRAVE_SEARCH_API_KEY: str = ""
    BRAVE_SEARCH_BASE_URL: str = "https://api.search.brave.com/res/v1/web/search"
    SEARCH_TIMEOUT: int = 15  # seconds per search request

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def missing_provider_keys(self) -> List[str]:
        """Names of provider API keys that are not configured."""
        required = {
            "ANTHROPIC_API_KEY": self.ANTHROPIC_API_KEY,
            "BRAVE_SEARCH_API_KEY": self.BRAVE_SEARCH_API_KEY,
        }
        return [name for name, value in required.items() if not value]


# Global settings instance
settings = Settings()
