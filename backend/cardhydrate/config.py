"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    cardhydrate_env: str = "development"
    cardhydrate_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logo fetch
    logo_fetch_timeout: float = 10.0
    logo_max_bytes: int = 5 * 1024 * 1024

    # Directory holding <template_id>.svg files; empty disables template lookup
    templates_dir: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
