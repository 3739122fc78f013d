"""Provider failure taxonomy.

Transient failures (timeouts, 5xx, throttling, dropped connections) are worth
retrying; permanent ones (missing credentials, 4xx, malformed payloads) are
not. Neither escapes the services: callers always get a best-effort value.
"""


class ProviderFailure(Exception):
    """A data provider could not produce a usable value."""

    retryable = False

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.source}] {base}" if self.source else base


class TransientProviderFailure(ProviderFailure):
    """Timeout, network error, throttling or 5xx; retried up to the configured limit."""

    retryable = True


class PermanentProviderFailure(ProviderFailure):
    """Missing/invalid credential or malformed response; never retried."""
