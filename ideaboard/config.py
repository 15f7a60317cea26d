"""
Idea Board – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Idea Board"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/ideas.db"
    # Seconds a SQLite writer waits on a locked database before failing
    DB_TIMEOUT: float = 15.0

    # ── Admin ──
    ADMIN_KEY: str = "change-me-admin-key"

    # ── Uploads ──
    UPLOAD_DIR: str = "./data/uploads"
    MAX_UPLOAD_BYTES: int = 6 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 8


settings = Settings()
