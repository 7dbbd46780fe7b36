from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    """Centralized application settings.

    This keeps environment-variable handling in one place so other modules can
    depend on strongly-typed attributes instead of calling os.getenv
    directly.
    """

    # Generative-text backend used for rewrite/transcribe/summarize:
    # "demo" (default, offline and deterministic) or "openai".
    ai_backend: str = os.getenv("AI_BACKEND", "demo")

    # Optional settings for the OpenAI provider.
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    llm_model: str = os.getenv("LLM_MODEL", "gpt-4.1-mini")
    transcription_model: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
    # Low temperature keeps rewrites close to the technician's facts.
    rewrite_temperature: float = float(os.getenv("REWRITE_TEMPERATURE", "0.2"))

    # Optional database configuration for the SQL-backed clientes repository.
    database_url: Optional[str] = os.getenv("DATABASE_URL")
    use_sql_repos: bool = os.getenv("USE_SQL_REPOS", "false").lower() == "true"

    # Directory where in-progress recordings are buffered.
    audio_upload_dir: Path = Path(os.getenv("AUDIO_UPLOAD_DIR", "uploads"))
    # Directory where generated visit reports are stored.
    report_dir: Path = Path(os.getenv("REPORT_DIR", "reports"))

    # File backing the "current user" session slot.
    session_file: Path = Path(os.getenv("SESSION_FILE", ".inside-notes-session.json"))

    # Basic API authentication configuration.
    # When ENABLE_API_AUTH=true, protected endpoints require a valid API key.
    enable_api_auth: bool = os.getenv("ENABLE_API_AUTH", "false").lower() == "true"
    # Comma-separated list of allowed API keys when auth is enabled.
    api_keys: Optional[str] = os.getenv("API_KEYS")

    # Downstream automation hook called after a report is generated. When
    # unset, the payload is only logged.
    report_webhook_url: Optional[str] = os.getenv("REPORT_WEBHOOK_URL")
    webhook_timeout_seconds: float = float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10"))

    # Notifications are dismissed automatically after this many seconds.
    notification_ttl_seconds: float = float(os.getenv("NOTIFICATION_TTL_SECONDS", "5"))

    # Open annotation editors untouched for this many seconds are closed and
    # their recording buffers released.
    workflow_idle_ttl_seconds: float = float(os.getenv("WORKFLOW_IDLE_TTL_SECONDS", "1800"))

    # Request size limit for uploaded audio chunks (in bytes).
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # CORS configuration: comma-separated origins. Default is "*" which is
    # acceptable for local development but should be tightened in production.
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "*")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
