"""
Shared configuration management for the Meetup Groups service.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GROUP_IDS = [
    "golangsf",
    "golangsv",
    "golang-paris",
    "Los-Angeles-Gophers",
    "golang-syd",
    "golang-users-berlin",
    "bostongolang",
    "Tokyo-Golang-Developers",
    "Go-User-Group-Hamburg",
]


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ACCESS_",
        case_sensitive=False,
        extra="allow",
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # External services
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Upstream group API
    meetup_api_url: str = Field(default="https://api.meetup.com")
    meetup_api_key: str = Field(default="obtain your apikey from https://secure.meetup.com/meetup_api/key/")
    meetup_timeout_seconds: float = Field(default=10.0, gt=0)

    # Groups aggregation
    group_ids: List[str] = Field(default_factory=lambda: list(DEFAULT_GROUP_IDS))
    group_cache_ttl_seconds: int = Field(default=3600, ge=1)
    group_cache_prefix: str = Field(default="groups")
    group_fetch_concurrency: Optional[int] = Field(default=None, ge=1)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
