import asyncio
import logging
import sys

from .api_client import ApiClient
from .config import settings
from .models import FlowOutcome
from .service import AuthFlowService
from .token_store import build_store


async def main() -> FlowOutcome:
    """
    Runs once at process start:
    - drops a stale wallet session
    - reconciles it with the Google session
    - reports where the user has to go next
    """
    cookies = None
    if settings.SESSION_COOKIE:
        cookies = {settings.SESSION_COOKIE_NAME: settings.SESSION_COOKIE}

    store = build_store(settings)
    try:
        async with ApiClient(settings.API_BASE_URI, settings.APP_NAME, settings.HTTP_TIMEOUT_SEC, cookies=cookies) as api:
            svc = AuthFlowService(api, store)
            return await svc.start()
    finally:
        await store.aclose()


def cli() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    outcome = asyncio.run(main())
    print(outcome.value)
    sys.exit(0 if outcome is FlowOutcome.PROCEED else 1)


if __name__ == "__main__":
    cli()
