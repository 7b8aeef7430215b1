from functools import lru_cache
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxwidget.models.constants import CURRENCIES, DEFAULT_SOURCE, DEFAULT_TARGET


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_RATE_PROVIDER, HTTP_TIMEOUT_SECONDS, DEFAULT_SOURCE).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Basic app metadata
    app_name: str = "Currency Converter"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rate provider
    # Allowed: 'frankfurter' (default), 'exchangerate-api'
    exchange_rate_provider: str = "frankfurter"
    frankfurter_base_url: AnyHttpUrl = "https://api.frankfurter.app/latest"
    exchangerate_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"
    http_timeout_seconds: float = 5.0
    http_retries: int = 2

    # Widget defaults
    default_source: str = DEFAULT_SOURCE
    default_target: str = DEFAULT_TARGET

    # Display formatting (pt-BR style by default)
    decimal_separator: str = ","
    group_separator: str = "."

    def init_post_load(self) -> None:
        """Normalize and validate derived fields."""
        allowed = {"frankfurter", "exchangerate-api"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        self.default_source = self.default_source.upper()
        self.default_target = self.default_target.upper()
        for code in (self.default_source, self.default_target):
            if code not in CURRENCIES:
                raise ValueError(f"Default currency '{code}' is not in the catalog")
        if self.decimal_separator == self.group_separator:
            raise ValueError("decimal and group separators must differ")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
