class EstateNewsError(Exception):
    """Base class for errors raised by estate_news."""


class ConfigError(EstateNewsError):
    """Raised when a configuration value is present but cannot be used."""


class SourceFetchError(EstateNewsError):
    """Raised when an upstream source cannot be fetched."""

    def __init__(self, message: str, *, url: str = "", status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class FeedFetchError(SourceFetchError):
    """Raised when an RSS/Atom feed cannot be downloaded."""


class ApiFetchError(SourceFetchError):
    """Raised when an aggregation API page cannot be fetched or decoded."""
