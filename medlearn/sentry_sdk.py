import logging

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from medlearn.config import settings

logger = logging.getLogger(__name__)


def sentry_init() -> bool:
    """Starts error reporting when a DSN is configured."""
    if not settings.sentry_dsn:
        logger.info('Sentry DSN not set, error reporting disabled')
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            LoggingIntegration(
                level=logging.INFO, event_level=logging.ERROR
            ),
            FastApiIntegration(),
            HttpxIntegration(),
            AsyncioIntegration(),
        ],
    )
    sentry_sdk.set_tag('service', 'medlearn-exercises')
    logger.info(f'Sentry enabled for {settings.sentry_environment}')
    return True
