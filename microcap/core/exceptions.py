class MicrocapError(Exception):
    """Base class for all microcap-trader exceptions."""


class ConfigError(MicrocapError):
    """Raised for missing/malformed configuration."""


class ProviderError(MicrocapError):
    """Raised when a data provider returns an invalid or failed response."""


class QuoteParseError(ProviderError):
    """Raised when a quote payload is missing or malformed."""


class DataValidationError(MicrocapError):
    """Raised when input data fails sanity or schema validation."""


class DecisionValidationError(DataValidationError):
    """Raised when an upstream decision payload is not acceptable."""


__all__ = [
    "MicrocapError",
    "ConfigError",
    "ProviderError",
    "QuoteParseError",
    "DataValidationError",
    "DecisionValidationError",
]
