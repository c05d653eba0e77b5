from dependency_injector import containers, providers

from rsutax.config import Settings
from rsutax.db.session import build_engine, build_session_factory
from rsutax.infra.fx.nationalbank import NationalbankProvider
from rsutax.infra.http.rate_limited_client import RateLimitedClient


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["rsutax.api.deps"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.fx_rate_per_second,
        timeout=settings.provided.fx_timeout_seconds,
    )

    nationalbank = providers.Singleton(
        NationalbankProvider,
        http_client=http_client,
        base_url=settings.provided.nationalbank_api_url,
    )
