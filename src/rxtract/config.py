"""Runtime settings via pydantic-settings, 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """rxtract runtime settings, loaded from env vars / .env file.

    Parser definitions are not settings; they are loaded from JSON with
    ``Parser.from_file``.
    """

    stream_buffer: int = Field(default=1, ge=1, description="Records buffered between a streaming scan and its reader")
    poll_interval: float = Field(default=0.05, gt=0, description="Seconds between cancellation checks while a stream is blocked")
    max_workers: int = Field(default=4, ge=1, description="Worker processes for parallel multi-file scans")
    default_output: str = Field(default="json", description="Default CLI output format (json|table)")
    log_level: str = Field(default="WARNING", description="CLI log level")

    class Config:
        env_prefix = "RXTRACT_"
        env_file = ".env"


settings = Settings()
