"""Danmarks Nationalbank currency-rate provider for historical USD/DKK."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from rsutax.exceptions import ExternalServiceError
from rsutax.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

BASE_URL = "https://www.nationalbanken.dk/api/currencyrates"

# Nationalbanken quotes DKK per 100 units of the foreign currency
QUOTE_UNIT = Decimal(100)


class NationalbankProvider:
    """Fetch the official USD/DKK rate for a date.

    Rate limiting (429), server errors and transport failures are retried with
    exponential backoff and raise ExternalServiceError once attempts run out.
    Any other unusable answer (4xx, malformed JSON, no USD quote) yields None.
    """

    def __init__(
        self,
        http_client: RateLimitedClient,
        base_url: str = BASE_URL,
        currency: str = "USD",
        max_attempts: int = 3,
        wait: wait_base | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url
        self._currency = currency
        self._max_attempts = max_attempts
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=8)

    async def get_rate(self, day: date) -> Decimal | None:
        """DKK per 1 unit of the configured currency on `day`, or None if not quoted."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ExternalServiceError),
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait,
            reraise=True,
        ):
            with attempt:
                return await self._fetch(day)
        return None

    async def _fetch(self, day: date) -> Decimal | None:
        try:
            resp = await self._http.get(self._base_url, params={"date": day.isoformat()})
        except httpx.TransportError as e:
            raise ExternalServiceError(f"Nationalbanken unreachable for {day}: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise ExternalServiceError(f"Nationalbanken returned {resp.status_code} for {day}")
        if resp.status_code != 200:
            logger.warning("Nationalbanken returned %d for %s", resp.status_code, day)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Nationalbanken sent a non-JSON body for %s", day)
            return None

        return self._parse_rate(data, day)

    def _parse_rate(self, data: object, day: date) -> Decimal | None:
        if not isinstance(data, list):
            logger.warning("Unexpected Nationalbanken payload for %s: %r", day, type(data).__name__)
            return None

        for item in data:
            if not isinstance(item, dict) or item.get("code") != self._currency:
                continue
            try:
                quoted = Decimal(str(item.get("rate")))
            except InvalidOperation:
                logger.warning("Unparseable %s rate for %s: %r", self._currency, day, item.get("rate"))
                return None
            if not quoted.is_finite() or quoted <= 0:
                return None
            return quoted / QUOTE_UNIT

        logger.info("No %s quote from Nationalbanken for %s", self._currency, day)
        return None
