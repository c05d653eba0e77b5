"""Exception hierarchy for rsutax."""


class RsuTaxError(Exception):
    """Base for all rsutax errors."""


class ExternalServiceError(RsuTaxError):
    """An outbound service failed in a way that may succeed on retry."""


class UsageError(RsuTaxError, ValueError):
    """The caller violated an operation's contract."""


class NegativeSharesError(UsageError):
    pass


class LotSelectionError(UsageError):
    """An explicitly requested lot is missing or cannot cover the disposal."""


class OversellError(UsageError):
    """More shares were requested than the position holds."""


class MethodSwitchError(UsageError):
    """Average-cost election is permanent and cannot be reverted."""


class InvalidPeriodError(UsageError):
    pass


class InvalidRateError(UsageError):
    pass


class DuplicateLotError(UsageError):
    """A lot id is already present in the position."""
