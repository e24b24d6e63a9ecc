from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from webgather.errors import EmptyResultError, ProviderError
from webgather.services.logger import log_provider_call

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Attempt(Generic[T]):
    """Outcome of one capability call: either a value or an error, never both."""

    provider: str
    value: T | None = None
    error: ProviderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @property
    def empty(self) -> bool:
        return isinstance(self.error, EmptyResultError)

    @classmethod
    def success(cls, provider: str, value: T) -> Attempt[T]:
        return cls(provider=provider, value=value)

    @classmethod
    def failure(cls, provider: str, error: ProviderError) -> Attempt[T]:
        return cls(provider=provider, error=error)


async def attempt(
    provider: str,
    target: str,
    call: Callable[[], Awaitable[T | None]],
    *,
    is_empty: Callable[[T], bool] | None = None,
) -> Attempt[T]:
    """Run one capability call and fold every outcome into an ``Attempt``.

    ``None`` or a value for which ``is_empty`` holds becomes an
    ``EmptyResultError`` failure; any raised exception becomes a
    ``ProviderError`` failure.
    """
    started = time.monotonic()
    try:
        value = await call()
    except ProviderError as exc:
        error: ProviderError = exc
    except Exception as exc:
        error = ProviderError(provider, str(exc) or exc.__class__.__name__)
    else:
        duration_ms = int((time.monotonic() - started) * 1000)
        if value is None or (is_empty is not None and is_empty(value)):
            log_provider_call(provider, target, status="empty", duration_ms=duration_ms)
            return Attempt.failure(provider, EmptyResultError(provider))
        log_provider_call(provider, target, duration_ms=duration_ms)
        return Attempt.success(provider, value)

    log_provider_call(
        provider,
        target,
        status="error",
        duration_ms=int((time.monotonic() - started) * 1000),
        error=str(error),
    )
    return Attempt.failure(provider, error)
