from rsutax.db.repos.exchange_rate_repo import ExchangeRateRepo
from rsutax.db.repos.holding_repo import HoldingRepo
from rsutax.db.repos.transaction_repo import TransactionRepo

__all__ = ["ExchangeRateRepo", "HoldingRepo", "TransactionRepo"]
