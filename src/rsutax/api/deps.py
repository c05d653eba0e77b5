from typing import AsyncGenerator

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rsutax.container import Container
from rsutax.infra.fx.nationalbank import NationalbankProvider
from rsutax.infra.fx.service import ExchangeRateService


@inject
async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(Provide[Container.session_factory]),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@inject
def get_rate_provider(
    provider: NationalbankProvider = Depends(Provide[Container.nationalbank]),
) -> NationalbankProvider | None:
    return provider


def get_exchange_rate_service(
    db: AsyncSession = Depends(get_db),
    provider: NationalbankProvider | None = Depends(get_rate_provider),
) -> ExchangeRateService:
    """ExchangeRateService bound to the request's session."""
    return ExchangeRateService(db, provider)
