from rsutax.db.models.exchange_rate import ExchangeRateCache
from rsutax.db.models.holding import HoldingRecord
from rsutax.db.models.transaction import TransactionRecord

__all__ = [
    "ExchangeRateCache",
    "HoldingRecord",
    "TransactionRecord",
]
