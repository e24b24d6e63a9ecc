from __future__ import annotations

import pytest

from webgather.errors import AggregateError, EmptyResultError, ProviderError
from webgather.services.attempt import attempt


@pytest.mark.asyncio
async def test_attempt_wraps_value():
    async def call():
        return ["x"]

    result = await attempt("exa", "q", call)

    assert result.ok
    assert result.value == ["x"]
    assert result.error is None


@pytest.mark.asyncio
async def test_attempt_marks_empty_values():
    async def call():
        return []

    result = await attempt("exa", "q", call, is_empty=lambda value: not value)

    assert not result.ok
    assert result.empty
    assert isinstance(result.error, EmptyResultError)


@pytest.mark.asyncio
async def test_attempt_wraps_unexpected_exceptions_as_provider_errors():
    async def call():
        raise KeyError("missing")

    result = await attempt("searxng", "q", call)

    assert not result.ok
    assert not result.empty
    assert isinstance(result.error, ProviderError)
    assert result.error.provider == "searxng"


@pytest.mark.asyncio
async def test_attempt_keeps_provider_errors_as_is():
    original = ProviderError("exa", "quota exceeded")

    async def call():
        raise original

    result = await attempt("exa", "q", call)

    assert result.error is original
    assert str(result.error) == "exa: quota exceeded"


def test_aggregate_error_joins_messages():
    assert str(AggregateError(["a: x", "b: y"])) == "a: x; b: y"
    assert str(AggregateError([])) == "Failed to retrieve any content"
