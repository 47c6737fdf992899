from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Probing defaults
    probe_default_interval: float = 5.0  # seconds between checks
    probe_check_timeout: float = 5.0  # HTTP client timeout per check
    probe_targets_file: str = "targets.yaml"

    # Health endpoint served by `serve`
    health_name: str = "probe-target"
    health_host: str = "0.0.0.0"
    health_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
