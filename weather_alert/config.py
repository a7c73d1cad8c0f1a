"""Monitor configuration pulled from environment variables via pydantic."""
from datetime import timedelta

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from weather_alert.errors import ConfigError
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the wind alert monitor."""
    model_config = SettingsConfigDict(env_prefix="ALERT_", extra="ignore")

    weather_url: str = "https://relay.sao.ru/tb/tcs/meteo/data/meteo.dat"
    chart_url: str = "https://www.sao.ru/tb/tcs/meteo/meteo_today.cgi"
    chart_path: str = "chart.png"

    notifier_backend: str = "telegram"  # options: telegram, log
    telegram_api_url: str = "https://api.telegram.org"
    bot_token: SecretStr | None = None
    telegram_chat_id: str | None = None

    wind_threshold: float = 14.5  # m/s
    poll_interval_seconds: float = Field(default=60.0, gt=0)
    debounce_minutes: float = Field(default=20.0, ge=0)
    lead_time_minutes: float = Field(default=120.0, ge=0)
    notify_routine_updates: bool = True

    # BTA, Special Astrophysical Observatory
    latitude: float = Field(default=43.649329, ge=-90, le=90)
    longitude: float = Field(default=41.426829, ge=-180, le=180)
    elevation: float = 2070.0

    http_timeout_seconds: float = 10.0
    http_retries: int = Field(default=3, ge=0)
    tail_bytes: int = Field(default=66, gt=0)
    log_level: str = "INFO"

    @field_validator("telegram_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("notifier_backend", "log_level", mode="after")
    @classmethod
    def normalize_case(cls, v: str, info: ValidationInfo) -> str:
        """Backend names are lowercase, level names uppercase."""
        v = str(v).strip()
        return v.upper() if info.field_name == "log_level" else v.lower()

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(seconds=self.poll_interval_seconds)

    @property
    def debounce(self) -> timedelta:
        return timedelta(minutes=self.debounce_minutes)

    @property
    def lead_time(self) -> timedelta:
        return timedelta(minutes=self.lead_time_minutes)

    def require_telegram(self) -> tuple[str, str]:
        """Return (bot_token, chat_id) or raise ConfigError if either is missing."""
        missing = []
        if self.bot_token is None or not self.bot_token.get_secret_value():
            missing.append("ALERT_BOT_TOKEN")
        if not self.telegram_chat_id:
            missing.append("ALERT_TELEGRAM_CHAT_ID")
        if missing:
            raise ConfigError(f"Telegram notifier requires {', '.join(missing)}")
        return self.bot_token.get_secret_value(), str(self.telegram_chat_id)


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
