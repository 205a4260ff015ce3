"""
Application configuration.

This module defines the application settings using a Pydantic model
populated from environment variables (and a .env file) with type
validation.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import os
from dotenv import load_dotenv

# Load .env from backend directory (works regardless of cwd when running uvicorn)
_backend_dir = Path(__file__).resolve().parent.parent
_env_path = _backend_dir / ".env"
load_dotenv(dotenv_path=_env_path)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    """
    Application configuration settings.

    Can be configured via environment variables or .env file.
    Environment variable names are uppercase (e.g., RECIPE_STORE_PATH).

    Attributes:
        GEMINI_API_KEY: Google Gemini API key (AI adaptation disabled without it)
        USE_AI_ADAPTATION: Try the AI collaborator before the rule engine
        LLM_MODEL: Gemini model name
        LLM_MAX_TOKENS: Maximum tokens per LLM response
        LLM_TEMPERATURE: Sampling temperature
        LLM_TIMEOUT: LLM request timeout in seconds
        LLM_STRUCTURED_OUTPUT: Ask Gemini for schema-validated JSON
        API_TIMEOUT: Request timeout for other HTTP calls, in seconds
        FODMAP_DATASET_URL: Public FODMAP food list JSON
        FODMAP_CACHE_PATH: On-disk cache for the dataset (empty disables)
        RECIPE_STORE_PATH: JSON file holding saved recipes
        CORS_ORIGINS: Allowed CORS origins
        LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)
    """

    # Gemini LLM Configuration
    GEMINI_API_KEY: Optional[str] = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY"),
        description="Google Gemini API key for AI recipe adaptation"
    )

    USE_AI_ADAPTATION: bool = Field(
        default_factory=lambda: _env_bool("USE_AI_ADAPTATION", "true"),
        description="Use Gemini for adaptation, falling back to built-in substitutions"
    )

    LLM_MODEL: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-2.0-flash"),
        description="Gemini model to use for recipe adaptation"
    )

    LLM_MAX_TOKENS: int = Field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "4096")),
        ge=256,
        le=16384,
        description="Maximum tokens per LLM response"
    )

    LLM_TEMPERATURE: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.4")),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for recipe adaptation"
    )

    LLM_TIMEOUT: int = Field(
        default_factory=lambda: int(os.getenv("LLM_TIMEOUT", "30")),
        ge=1,
        le=300,
        description="LLM request timeout in seconds"
    )

    LLM_STRUCTURED_OUTPUT: bool = Field(
        default_factory=lambda: _env_bool("LLM_STRUCTURED_OUTPUT", "true"),
        description="Request schema-validated JSON instead of free text"
    )

    # API Timeouts
    API_TIMEOUT: int = Field(
        default_factory=lambda: int(os.getenv("API_TIMEOUT", "10")),
        ge=1,
        le=60,
        description="API request timeout in seconds"
    )

    # FODMAP dataset
    FODMAP_DATASET_URL: str = Field(
        default_factory=lambda: os.getenv(
            "FODMAP_DATASET_URL",
            "https://raw.githubusercontent.com/oseparovic/fodmap_list/master/fodmap_repo.json",
        ),
        description="URL of the public FODMAP food list"
    )

    FODMAP_CACHE_PATH: Optional[str] = Field(
        default_factory=lambda: os.getenv(
            "FODMAP_CACHE_PATH", str(_backend_dir / "data" / "fodmap_dataset.json")
        ),
        description="On-disk cache of the FODMAP dataset"
    )

    # Storage
    RECIPE_STORE_PATH: str = Field(
        default_factory=lambda: os.getenv(
            "RECIPE_STORE_PATH", str(_backend_dir / "data" / "recipes.json")
        ),
        description="JSON file holding saved recipes"
    )

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ],
        description="Allowed CORS origins (comma-separated in the environment)"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Logging level (DEBUG/INFO/WARNING/ERROR)"
    )

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )
        return v_upper

    @field_validator('FODMAP_DATASET_URL')
    @classmethod
    def validate_url(cls, v):
        """Ensure URLs are properly formatted."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip('/')  # Remove trailing slash

    @field_validator('FODMAP_CACHE_PATH')
    @classmethod
    def empty_cache_path_disables(cls, v):
        return v or None

    model_config = {"validate_default": True}


# Create global settings instance
settings = Settings()


# Configure logging based on settings
def configure_logging():
    """Configure application logging based on settings."""
    import logging

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.LOG_LEVEL} level")
    logger.info(f"Recipe store: {settings.RECIPE_STORE_PATH}")
    logger.info(f"FODMAP dataset URL: {settings.FODMAP_DATASET_URL}")
    ai_state = "Enabled" if settings.USE_AI_ADAPTATION and settings.GEMINI_API_KEY else "Disabled (built-in substitutions)"
    logger.info(f"AI adaptation: {ai_state}")


# Initialize logging on import
configure_logging()
