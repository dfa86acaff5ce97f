"""Environment-driven settings."""

import os
from typing import Optional, Mapping

from pydantic import BaseModel, Field, field_validator, ConfigDict

FIGMA_API_BASE = "https://api.figma.com/v1"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseModel):
    """Runtime configuration, usually read from the environment."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    token: Optional[str] = Field(default=None, description="Figma personal access token")
    api_base: str = Field(default=FIGMA_API_BASE, description="Figma REST API base URL")
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Per-request timeout in seconds")
    export_deadline: Optional[float] = Field(
        default=None,
        gt=0,
        description="Deadline in seconds for fetching all variables (unset = wait indefinitely)"
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    log_file: Optional[str] = Field(default=None, description="Optional rotating log file path")

    @field_validator('api_base')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @field_validator('token', 'log_file', 'export_deadline', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {
            'token': env.get("FIGMA_ACCESS_TOKEN") or env.get("FIGMA_TOKEN"),
            'api_base': env.get("FIGMA_API_BASE"),
            'request_timeout': env.get("FIGMA_REQUEST_TIMEOUT"),
            'export_deadline': env.get("FIGMA_EXPORT_DEADLINE"),
            'log_level': env.get("FIGMA_TOKENS_LOG_LEVEL"),
            'log_file': env.get("FIGMA_TOKENS_LOG_FILE"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    def require_token(self) -> str:
        """Token or a ValueError explaining how to set one."""
        if not self.token:
            raise ValueError(
                "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable. "
                "Get your token from: https://www.figma.com/developers/api#access-tokens"
            )
        return self.token
