"""Application configuration via pydantic-settings.

Values are loaded from a .env file at the project root and from the
environment. The .env file takes precedence over OS-level environment
variables so stale system env vars never shadow the project config.
No hardcoded secrets anywhere.
"""

from pathlib import Path
from typing import Literal, Tuple, Type

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Resolve .env from project root (two levels up from this file: hotel_relay/core/config.py → project root)
_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Central application settings. .env file wins over OS env vars."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Override source priority: .env file > OS env vars > defaults."""
        return (init_settings, dotenv_settings, env_settings, file_secret_settings)

    # --- Translation provider ---
    translation_provider: Literal["sarvam", "simulated"] = "simulated"
    sarvam_key: str = ""
    sarvam_base_url: str = "https://api.sarvam.ai"
    sarvam_stt_model: str = "saaras:v1"
    provider_timeout_seconds: float = 10.0
    simulated_latency_scale: float = 1.0

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 3000
    public_base_url: str = ""
    allowed_origins: str = "*"

    # --- Rooms & messages ---
    room_cleanup_delay_seconds: int = 300
    max_text_chars: int = 1000
    max_audio_bytes: int = 10 * 1024 * 1024

    # --- Rate limiting ---
    rate_limit_window_ms: int = 900_000
    rate_limit_max: int = 100

    # --- App ---
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def allowed_origin_list(self) -> list[str]:
        """ALLOWED_ORIGINS split on commas; ``*`` stays a single wildcard entry."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.rate_limit_window_ms / 1000


settings = Settings()
