from __future__ import annotations


class FetchError(Exception):
    """Base class for everything the fetcher raises."""


class ConfigurationError(FetchError, ValueError):
    """Invalid fetch parameters. Raised before any network activity."""


class TransportError(FetchError):
    """Network-level failure of a single attempt (timeout, DNS, reset...)."""

    def __init__(self, url: str, attempt: int, error: Exception):
        super().__init__(f"{type(error).__name__} on attempt {attempt} for {url}: {error}")
        self.url = url
        self.attempt = attempt
        self.error = error


class ExhaustedRetriesError(FetchError):
    def __init__(self, url: str, attempts: int, last_error: TransportError):
        super().__init__(f"{url} failed after {attempts} attempt(s): {last_error}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class RedirectLimitError(FetchError):
    pass


class FetchCancelledError(FetchError):
    pass


class ResponseDecodingError(FetchError):
    """The response arrived but its body could not be decoded (bad gzip, brotli...)."""
