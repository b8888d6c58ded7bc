"""
Common Configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class BaseAppConfig(BaseSettings):
    """
    Common application settings.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(
        default="/app/config/function_web_log.yaml", description="Logging dictConfig YAML path"
    )
    VERIFY_SSL: bool = Field(default=False, description="Whether to verify SSL certificates")

    # ===== Application identity =====
    APPLICATION_NAME: str = Field(default="", description="Application name")
    CONTEXT_ID: str = Field(
        default="application", description="Context identifier used when no name is set"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )
