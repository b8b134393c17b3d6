"""
Application settings.

Values come from the environment (or a local .env file); every field maps
to the upper-case environment variable of the same name.
"""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "DoctorPath AI API"
    version: str = "1.0.0"

    # ── Persistence ──────────────────────────────────────────────────────
    database_url: str = "sqlite:///./doctorpath.db"
    seed_demo_data: bool = True

    # ── Generative model ─────────────────────────────────────────────────
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.7
    gemini_max_output_tokens: int = 4096
    gemini_timeout_seconds: int = 30

    # ── Uploads ──────────────────────────────────────────────────────────
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # ── Sessions ─────────────────────────────────────────────────────────
    session_ttl_hours: int = 24
    session_cookie_name: str = "doctorpath_session"
    cookie_secure: bool = False

    # ── HTTP / logging ───────────────────────────────────────────────────
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    log_file: Optional[str] = None


settings = Settings()
