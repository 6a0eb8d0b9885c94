"""
Application configuration for DriveOptima.

Settings are read from the process environment (prefix ``DRIVEOPTIMA_``) and
an optional ``.env`` file. The Gemini key is also accepted under the plain
``GEMINI_API_KEY``, ``API_KEY`` and ``GEMINI_CONFIG`` names.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        gemini_api_key: Credential for the classifier; analysis fails without it
        gemini_model: Gemini model used for analysis
        classifier: "gemini" for the live service, "static" for the offline double
        apply_delay_seconds: Simulated latency of applying selected changes
        demo_user: Identity assigned by the demo login
        cookie_name: Cookie holding the signed-in identity
        log_level: Root logging level
    """

    model_config = SettingsConfigDict(
        env_prefix="DRIVEOPTIMA_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "DRIVEOPTIMA_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY", "GEMINI_CONFIG"
        ),
    )
    gemini_model: str = "gemini-3-pro-preview"
    classifier: Literal["gemini", "static"] = "gemini"
    apply_delay_seconds: float = 2.0
    demo_user: str = "demo@driveoptima.ai"
    cookie_name: str = "driveOptimaUser"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings, loaded once per process.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
