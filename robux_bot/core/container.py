"""Dependency-injection container.

Wires the rate table, exchange-rate provider, pricing engine, response
formatter and command router together. Every component is a singleton so all
events share one immutable rate table and one provider.
"""

from dependency_injector import containers, providers

from ..bot.response_formatter import ResponseFormatter
from ..bot.router import CommandRouter
from ..config import PricingConfig, RateConfig
from ..models import PriceKind, RateTable
from ..services.currency import build_rate_provider
from ..services.pricing import PricingEngine


def build_rate_table(pricing: PricingConfig) -> RateTable:
    """Create the per-Robux rate table from pricing settings."""
    return RateTable(
        {
            PriceKind.BUY_THEN_TRANSFER: pricing.buy_then_transfer_rate,
            PriceKind.ASSET_THEN_TRANSFER: pricing.asset_then_transfer_rate,
        }
    )


class Container(containers.DeclarativeContainer):
    """DI container for the application.

    The pricing, rates and bot_name providers are filled in from the loaded
    configuration; tests override them with their own objects.
    """

    pricing = providers.Dependency(instance_of=PricingConfig)
    rates = providers.Dependency(instance_of=RateConfig)
    bot_name = providers.Object(None)

    # Services
    rate_table = providers.Singleton(build_rate_table, pricing=pricing)
    rate_provider = providers.Singleton(build_rate_provider, rate_config=rates)
    pricing_engine = providers.Singleton(
        PricingEngine,
        rate_table=rate_table,
        rate_provider=rate_provider,
        markup_rate=pricing.provided.markup_rate,
        gamepass_buffer=pricing.provided.gamepass_buffer,
    )

    # Bot components
    response_formatter = providers.Singleton(ResponseFormatter, bot_name=bot_name)
    command_router = providers.Singleton(
        CommandRouter, engine=pricing_engine, formatter=response_formatter
    )
