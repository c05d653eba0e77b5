"""Warm the USD/DKK rate cache for a tax year.

Usage:
    PYTHONPATH=src python scripts/prefetch_rates.py --year 2024

Idempotent: dates already cached are left untouched. Weekends are skipped.
"""

import argparse
import asyncio
import logging
import sys

from rsutax.accounting.periods import year_range
from rsutax.config import settings
from rsutax.db.session import build_engine, build_session_factory, session_scope
from rsutax.infra.fx.nationalbank import NationalbankProvider
from rsutax.infra.fx.service import ExchangeRateService
from rsutax.infra.http.rate_limited_client import RateLimitedClient

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("prefetch_rates")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def main(year: int) -> int:
    period = year_range(year)
    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)

    async with RateLimitedClient(settings.fx_rate_per_second, settings.fx_timeout_seconds) as http_client:
        provider = NationalbankProvider(http_client, base_url=settings.nationalbank_api_url)
        async with session_scope(session_factory) as session:
            service = ExchangeRateService(session, provider)
            resolved = await service.prefetch_range(period.start, period.end)

    await engine.dispose()
    logger.info("Year %d: %d business days with a USD/DKK rate", year, resolved)
    return 0 if resolved else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--year", type=int, required=True)
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.year)))
