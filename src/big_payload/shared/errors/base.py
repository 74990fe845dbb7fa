"""Base error types shared by producers and consumers."""


class BigPayloadError(Exception):
    """Base class for all errors raised by this package."""

    pass


class ConfigurationError(BigPayloadError):
    """
    Raised when producer or consumer configuration is invalid or missing.

    On-Call Note:
        This error means the producer/consumer cannot be constructed. Check
        the BIG_PAYLOAD_* environment variables.
    """

    pass
