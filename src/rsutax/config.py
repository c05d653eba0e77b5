from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 54378
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "rsutax"
    nationalbank_api_url: str = "https://www.nationalbanken.dk/api/currencyrates"
    fx_rate_per_second: float = 5.0
    fx_timeout_seconds: float = 15.0
    default_usd_dkk_rate: float = 6.9  # Used when no cached, fetched or manual rate exists
    debug: bool = True

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    class Config:
        env_file = ".env"


settings = Settings()
