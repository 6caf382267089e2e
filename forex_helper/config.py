from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Web server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_file: str = "data/forex_helper.log"

    # Account defaults
    default_account_currency: str = "USD"

    # Risk guideline: risk above this share of balance is a validation error
    max_risk_pct: float = 5.0

    # Metrics: reject trade sets spanning several P/L currencies
    metrics_strict_currency: bool = True

    # Currency conversion
    # Static table keyed by 6-letter pair, e.g. {"EURUSD": 1.08}
    static_rates: dict[str, float] = {}
    rates_api_url: str = ""  # empty = use static_rates
    rates_timeout_seconds: float = 5.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def use_http_rates(self) -> bool:
        return bool(self.rates_api_url)


settings = Settings()
