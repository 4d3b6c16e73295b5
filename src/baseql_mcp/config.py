"""Configuration for baseql-mcp."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # BaseQL endpoint
    # ==========================================================================

    baseql_api_endpoint: str = Field(
        default="",
        description="BaseQL GraphQL endpoint URL (https://api.baseql.com/...)",
    )
    baseql_api_key: str = Field(
        default="",
        description="BaseQL API key, with or without the 'Bearer ' prefix",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for each upstream GraphQL request",
    )

    @field_validator("baseql_api_endpoint", "baseql_api_key")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip()

    # ==========================================================================
    # MCP server
    # ==========================================================================

    mcp_transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport: 'stdio' for local clients, 'http' for remote",
    )
    mcp_host: str = Field(
        default="0.0.0.0",
        description="Host to bind MCP HTTP server",
    )
    mcp_port: int = Field(
        default=8000,
        description="Port for MCP HTTP server",
    )
    mcp_path: str = Field(
        default="/mcp",
        description="Path for MCP HTTP endpoint",
    )

    # Observability
    log_level: str = Field(default="INFO", description="Logging level")
    logfire_token: str = Field(
        default="",
        description="Pydantic Logfire token for observability (optional)",
    )

    @property
    def is_configured(self) -> bool:
        """True when both the endpoint and the API key are set."""
        return bool(self.baseql_api_endpoint and self.baseql_api_key)

    def masked_api_key(self) -> str:
        """API key with everything but the last four characters hidden."""
        key = self.baseql_api_key.removeprefix("Bearer ").strip()
        if not key:
            return ""
        if len(key) <= 4:
            return "*" * len(key)
        return "*" * (len(key) - 4) + key[-4:]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    global _settings
    _settings = None
