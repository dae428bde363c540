"""Exchange client initialization from settings."""

from __future__ import annotations

import logging
from typing import Dict

from ..settings import Settings
from .base import BaseExchangeClient
from .factory import create_exchange_client

logger = logging.getLogger(__name__)


def create_exchange_clients_from_settings(settings: Settings) -> Dict[str, BaseExchangeClient]:
    """Create exchange clients from settings, keyed by lower-case exchange name."""
    clients: Dict[str, BaseExchangeClient] = {}

    for exchange_name, exchange_config in settings.exchanges.items():
        if not exchange_config.enabled:
            logger.debug("Exchange %s is disabled, skipping", exchange_name)
            continue

        if not exchange_config.credentials:
            logger.warning("Exchange %s has no credentials configured, skipping", exchange_name)
            continue

        creds = exchange_config.credentials
        options = dict(exchange_config.options)
        if creds.account_id is not None:
            options["account_id"] = creds.account_id

        client = create_exchange_client(
            exchange=exchange_name,
            api_key=creds.api_key.get_secret_value(),
            api_secret=creds.api_secret.get_secret_value(),
            customer_id=creds.customer_id,
            **options,
        )
        clients[exchange_name.lower()] = client
        logger.info("Initialized exchange client for %s", exchange_name)

    return clients
