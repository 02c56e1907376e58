"""Configuration management for the Robux price bot.

Handles all application configuration including environment variables, the
YAML rate file, and default settings. Provides structured configuration
classes for the bot transport, Robux pricing, and exchange-rate lookup.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingConfig(BaseSettings):
    """Robux pricing parameters.

    Attributes:
        buy_then_transfer_rate: GBP per Robux for 'b/t' quotes.
        asset_then_transfer_rate: GBP per Robux for 'a/t' quotes.
        markup_rate: Share the platform keeps from a sale (0.30 = 30%).
        gamepass_buffer: Robux added after rounding an 'a/t' gamepass price.
    """

    model_config = SettingsConfigDict(env_prefix="PRICING_", env_file=".env", extra="ignore")

    buy_then_transfer_rate: float = Field(default=0.0045, gt=0)
    asset_then_transfer_rate: float = Field(default=0.00675, gt=0)
    markup_rate: float = Field(default=0.30, ge=0, lt=1)
    gamepass_buffer: int = Field(default=1, ge=0)


class RateConfig(BaseSettings):
    """Exchange-rate source settings.

    Attributes:
        source: 'fixed' uses gbp_to_usd, 'live' queries the exchange-rate API.
        gbp_to_usd: Constant GBP to USD rate for the fixed source.
        api_url: Base URL of the exchange-rate API.
        api_key: API key sent with every live request.
        timeout: Total timeout of a live request in seconds.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    source: Literal["fixed", "live"] = Field(default="fixed", validation_alias="RATE_SOURCE")
    gbp_to_usd: float = Field(default=1.22, gt=0, validation_alias="GBP_TO_USD_RATE")
    api_url: str = Field(
        default="https://api.exchangerate-api.com/v4", validation_alias="EXCHANGE_RATE_API_URL"
    )
    api_key: str | None = Field(default=None, validation_alias="EXCHANGE_RATE_API_KEY")
    timeout: float = Field(default=10.0, gt=0, validation_alias="EXCHANGE_RATE_TIMEOUT")


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        bot_name: Name shown in response footers.
        log_level: Root logging level.
        port: Server port for webhook mode.
        listen_host: Interface the webhook server binds to.
        railway_domain: Railway public domain for webhooks.
        railway_url: Railway URL for webhooks (fallback).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    bot_token: str = Field(default="", validation_alias="BOT_TOKEN")
    bot_name: str = Field(default="Robux Price Bot", validation_alias="BOT_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    port: int = Field(default=8000, validation_alias="PORT")
    listen_host: str = Field(default="127.0.0.1", validation_alias="BOT_LISTEN_HOST")
    railway_domain: str | None = Field(default=None, validation_alias="RAILWAY_PUBLIC_DOMAIN")
    railway_url: str | None = Field(default=None, validation_alias="RAILWAY_URL")

    @property
    def webhook_domain(self) -> str | None:
        """Get webhook domain for Railway deployment.

        Returns:
            Domain string if available, None for polling mode.
        """
        return self.railway_domain or self.railway_url

    @property
    def use_webhook(self) -> bool:
        """Determine if webhook mode should be used.

        Returns:
            True if webhook domain is configured, False for polling mode.
        """
        return bool(self.webhook_domain)


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables, the YAML rate file and
    default values. Values in rates.yml override the built-in defaults;
    environment variables override both.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to robux_bot/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.bot = BotConfig()

        rates_path = self.config_dir / "rates.yml"
        if rates_path.exists():
            with open(rates_path) as f:
                rates_data = yaml.safe_load(f) or {}

            pricing_data = rates_data.get("pricing", {})
            per_robux = pricing_data.get("gbp_per_robux", {})
            self.pricing = PricingConfig(
                **_without_env_overrides(
                    PricingConfig,
                    {
                        "buy_then_transfer_rate": per_robux.get("b/t", 0.0045),
                        "asset_then_transfer_rate": per_robux.get("a/t", 0.00675),
                        "markup_rate": pricing_data.get("markup_rate", 0.30),
                        "gamepass_buffer": pricing_data.get("gamepass_buffer", 1),
                    },
                )
            )

            exchange_data = rates_data.get("exchange", {})
            self.rates = RateConfig(
                **_without_env_overrides(
                    RateConfig,
                    {
                        "source": exchange_data.get("source", "fixed"),
                        "gbp_to_usd": exchange_data.get("gbp_to_usd", 1.22),
                        "api_url": exchange_data.get(
                            "api_url", "https://api.exchangerate-api.com/v4"
                        ),
                        "timeout": exchange_data.get("timeout", 10.0),
                    },
                )
            )
        else:
            # Use defaults if config file not found
            self.pricing = PricingConfig()
            self.rates = RateConfig()


def _without_env_overrides(
    settings_cls: type[BaseSettings], values: dict[str, object]
) -> dict[str, object]:
    """Drop file values whose setting is already given by the environment or .env.

    Init arguments outrank every other source in pydantic-settings, so file
    values are only passed for settings the environment leaves unset. Keys are
    passed by their validation alias when the field has one.
    """
    from_environment = settings_cls().model_fields_set
    result: dict[str, object] = {}
    for name, value in values.items():
        if name in from_environment:
            continue
        field = settings_cls.model_fields[name]
        alias = field.validation_alias if isinstance(field.validation_alias, str) else None
        result[alias or name] = value
    return result


# Global configuration instance
config = Config()
