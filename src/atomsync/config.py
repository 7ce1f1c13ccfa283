"""Configuration management for atomsync.

All configuration comes from environment variables. Uses pydantic-settings
for validation so malformed values produce clear errors at startup rather
than cryptic failures halfway through a history walk.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = "atomsync/0.1.0"


class Config(BaseSettings):
    """Engine and server configuration loaded from environment variables."""

    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="ATOMSYNC_USER_AGENT")
    http_timeout: float = Field(default=30.0, gt=0, alias="ATOMSYNC_HTTP_TIMEOUT")
    max_history_hops: int | None = Field(default=100, gt=0, alias="ATOMSYNC_MAX_HISTORY_HOPS")
    server_host: str = Field(default="127.0.0.1", alias="MCP_SERVER_HOST")
    server_port: int = Field(default=8000, alias="MCP_SERVER_PORT")

    model_config = SettingsConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


def load_config() -> Config:
    """Load and validate config from environment. Raises on malformed vars."""
    return Config()
