"""Tests for the Google OAuth service's request handling."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from app.services.google_service import GoogleOAuthError, GoogleOAuthService


@pytest.fixture
def service():
    return GoogleOAuthService()


@pytest.fixture
def unreachable():
    """Make every outgoing request fail to connect."""
    request = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
    with patch.object(httpx.AsyncClient, "request", new=request), patch(
        "app.services.google_service.asyncio.sleep", new=AsyncMock()
    ):
        yield request


def test_code_exchange_is_sent_once(service, unreachable):
    with pytest.raises(GoogleOAuthError):
        asyncio.run(service.exchange_code("single-use-code", redirect_uri="http://localhost/cb"))

    assert unreachable.call_count == 1


def test_profile_fetch_is_retried(service, unreachable):
    with pytest.raises(GoogleOAuthError):
        asyncio.run(service.get_user_info("google-token"))

    assert unreachable.call_count == GoogleOAuthService.MAX_RETRIES
