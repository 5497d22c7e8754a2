"""Configuration management for the chat completion proxy."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_UPSTREAM_URL = "https://router.huggingface.co/v1/chat/completions"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host", alias="HOST")
    port: int = Field(default=3000, description="Server port", alias="PORT")
    log_level: str = Field(default="info", description="Log level", alias="LOG_LEVEL")

    # Upstream settings
    hugging_face_api_url: str = Field(
        default=DEFAULT_UPSTREAM_URL,
        description="Upstream chat completions URL",
        alias="HUGGING_FACE_API_URL",
    )
    hugging_face_api_key: Optional[str] = Field(
        default=None, description="Upstream API key", alias="HUGGING_FACE_API_KEY"
    )
    use_third_party_router: bool = Field(
        default=False,
        description="Address the upstream through a third-party router",
        alias="USE_THIRD_PARTY_ROUTER",
    )
    third_party_router_url: Optional[str] = Field(
        default=None,
        description="Router URL; falls back to HUGGING_FACE_API_URL when unset",
        alias="THIRD_PARTY_ROUTER_URL",
    )

    # Request settings
    request_timeout: float = Field(
        default=90, gt=0, description="Request timeout in seconds", alias="REQUEST_TIMEOUT"
    )

    # Authentication settings
    auth_key: Optional[str] = Field(
        default=None,
        description="Required api-key header value for proxy access",
        alias="API_KEY",
    )

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def upstream_url(self) -> str:
        """Upstream URL for the selected addressing mode."""
        if self.use_third_party_router and self.third_party_router_url:
            return self.third_party_router_url
        return self.hugging_face_api_url


@lru_cache
def get_settings() -> Settings:
    """Settings read from the environment, built once per process."""
    return Settings()
