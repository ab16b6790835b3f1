"""
Centralized configuration management using Pydantic Settings.
Validates environment variables on startup and provides typed config access.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings with validation.
    Loads from environment variables with fallback to .env file.
    """

    # Toolhouse Endpoints
    toolhouse_api_url: str = Field(
        default="https://api.toolhouse.ai/v1",
        description="Base URL of the Toolhouse metadata API (agent listing/lookup)"
    )
    toolhouse_agents_url: str = Field(
        default="https://agents.toolhouse.ai",
        description="Base URL of the Toolhouse agent conversation endpoint"
    )

    # Toolhouse Credentials (Optional - public agents work without a token)
    toolhouse_api_token: Optional[str] = None
    credential_name: str = "toolhouseApi"

    # HTTP Transport Configuration
    http_timeout_seconds: float = 30.0

    # Webhook Configuration
    webhook_path: str = Field(
        default="/toolhouse-callback",
        description="Path on which Toolhouse run callbacks are received"
    )

    # Environment
    environment: str = "development"
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    def validate_critical_config(self):
        """
        Validate critical configuration on startup.
        Raises ValueError if critical config is missing.
        """
        errors = []

        if not self.toolhouse_api_url:
            errors.append("TOOLHOUSE_API_URL must be set")

        if not self.toolhouse_agents_url:
            errors.append("TOOLHOUSE_AGENTS_URL must be set")

        if not self.webhook_path.startswith("/"):
            errors.append("WEBHOOK_PATH must start with '/'")

        # Warn about the token if not configured (non-critical)
        if not self.toolhouse_api_token:
            import structlog
            logger = structlog.get_logger()
            logger.warning(
                "toolhouse_token_not_configured",
                message="TOOLHOUSE_API_TOKEN not set - only public agents are reachable"
            )

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


# Global settings instance
settings = Settings()
