"""Tests for caller identity resolution."""

import pytest
from starlette.requests import Request

from app.core.auth import require_caller
from app.core.exceptions import UnauthorizedError
from app.core.logging import caller_id_ctx


def make_request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/sales/analytics",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


async def test_require_caller_returns_header_value():
    """The configured header value is the caller ID."""
    caller_id = await require_caller(make_request({"X-User-Id": "user_123"}))

    assert caller_id == "user_123"
    assert caller_id_ctx.get() == "user_123"


async def test_require_caller_rejects_missing_header():
    """Requests without the header are unauthorized."""
    with pytest.raises(UnauthorizedError) as exc_info:
        await require_caller(make_request({}))

    assert exc_info.value.status_code == 401


async def test_require_caller_rejects_blank_header():
    """Whitespace-only identities are treated as missing."""
    with pytest.raises(UnauthorizedError):
        await require_caller(make_request({"X-User-Id": "   "}))
