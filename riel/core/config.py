"""
Pydantic Settings: engine configuration loaded from environment variables.

Every variable is read with the ``RIEL_`` prefix, e.g. ``RIEL_LOG_LEVEL=DEBUG``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    APP_ENV: str = "development"

    # ── Logging ───────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_STEP_EVENTS: bool = True

    model_config = SettingsConfigDict(
        env_prefix="RIEL_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


settings = Settings()
