from enum import Enum


class RateSource(str, Enum):
    """Where a resolved USD/DKK rate came from."""

    CACHED = "CACHED"
    API = "API"
    MANUAL = "MANUAL"
    DEFAULT = "DEFAULT"
