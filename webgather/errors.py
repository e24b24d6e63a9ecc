from __future__ import annotations


class WebGatherError(Exception):
    """Base class for acquisition-layer errors."""


class ValidationError(WebGatherError):
    """Input rejected before any network I/O (e.g. a non-http URL)."""


class ProviderError(WebGatherError):
    """A capability call failed, raised, or returned an unusable payload."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider
        self.message = message

    def __str__(self) -> str:
        return f"{self.provider}: {self.message}"


class EmptyResultError(ProviderError):
    """A capability call succeeded but produced nothing usable.

    Treated as a soft failure: it advances the fallback chain and is never
    surfaced to the caller on its own.
    """

    def __init__(self, provider: str, message: str = "returned no usable content"):
        super().__init__(provider, message)


class AggregateError(WebGatherError):
    """Every item of a batch failed."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "Failed to retrieve any content")
