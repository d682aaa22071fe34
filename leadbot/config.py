"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("leadbot.config")

SUPPORTED_LANGUAGES = ("en", "hi")


class Settings(BaseSettings):
    # Remote collaborators (catalog, assistant, lead intake)
    api_url: str = "http://localhost:8080/api"
    request_timeout: float = 30.0

    # Conversation
    default_language: str = "en"
    lead_first_prompt_delay: float = 1.0
    lead_next_prompt_delay: float = 1.5
    max_sessions: int = 500
    # Sessions with no visitor activity for this long are evicted
    session_idle_timeout: float = 1800.0
    session_sweep_interval: float = 60.0
    event_history_size: int = 500

    # Admin auth
    admin_api_key: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if self.default_language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE={self.default_language!r} is not supported. "
                f"Use one of: {', '.join(SUPPORTED_LANGUAGES)}."
            )

        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable admin access."
                )

        if self.api_url.startswith("http://localhost"):
            warnings.append(
                f"API_URL points at {self.api_url}; assistant and lead intake "
                "calls will fail unless the backend runs locally."
            )

        if self.lead_first_prompt_delay < 0 or self.lead_next_prompt_delay < 0:
            raise ValueError("Lead prompt delays must not be negative.")

        if self.session_idle_timeout <= 0 or self.session_sweep_interval <= 0:
            raise ValueError("SESSION_IDLE_TIMEOUT and SESSION_SWEEP_INTERVAL must be positive.")

        return warnings


settings = Settings()
