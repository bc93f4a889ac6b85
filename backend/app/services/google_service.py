"""
Google OAuth integration service.

Handles the authorization-code flow: building the consent URL, exchanging
the code for tokens and fetching the signed-in Google profile.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class GoogleOAuthError(Exception):
    """Exception raised when a Google OAuth call fails."""

    def __init__(self, message: str, status_code: int = None, response_body: dict = None):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(self.message)


class GoogleOAuthService:
    """
    Service for the Google OAuth 2.0 authorization-code flow.

    Attributes:
        client_id: Google OAuth client ID
        client_secret: Google OAuth client secret
        auth_url: Google consent screen URL
        token_url: Google token exchange URL
        userinfo_url: OpenID Connect userinfo endpoint
    """

    SCOPES = "openid email profile"

    MAX_RETRIES = 3
    RETRY_DELAY = 1.0  # seconds

    def __init__(self):
        """Initialize the Google service with configuration from settings."""
        self.client_id = settings.GOOGLE_CLIENT_ID
        self.client_secret = settings.GOOGLE_CLIENT_SECRET
        self.auth_url = settings.GOOGLE_AUTH_URL
        self.token_url = settings.GOOGLE_TOKEN_URL
        self.userinfo_url = settings.GOOGLE_USERINFO_URL

    def get_authorization_url(self, redirect_uri: str, state: Optional[str] = None) -> str:
        """
        Generate the Google consent screen URL.

        Args:
            redirect_uri: The URI Google redirects to after consent
            state: Optional state parameter for CSRF protection

        Returns:
            str: The full authorization URL with query parameters
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self.SCOPES,
            "access_type": "online",
            "prompt": "select_account",
        }

        if state:
            params["state"] = state

        return f"{self.auth_url}?{urlencode(params)}"

    async def _make_request(
        self,
        method: str,
        url: str,
        headers: dict = None,
        data: dict = None,
        timeout: float = 15.0,
        retry: bool = True,
    ) -> dict:
        """
        Make an HTTP request, retrying timeouts and connection errors.

        Pass ``retry=False`` for requests that must not be sent twice.

        Raises:
            GoogleOAuthError: If Google returns an error or stays unreachable
        """
        async with httpx.AsyncClient(timeout=timeout) as client:
            attempts = self.MAX_RETRIES if retry else 1
            for attempt in range(attempts):
                try:
                    response = await client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        data=data,
                    )

                    if response.status_code >= 400:
                        try:
                            error_body = response.json()
                        except ValueError:
                            error_body = {"raw": response.text}

                        error_message = (
                            error_body.get("error_description")
                            or error_body.get("error")
                            or f"HTTP {response.status_code}"
                        )
                        if not isinstance(error_message, str):
                            error_message = str(error_message)
                        logger.error(f"Google API error: {response.status_code} - {error_message}")
                        raise GoogleOAuthError(
                            message=error_message,
                            status_code=response.status_code,
                            response_body=error_body,
                        )

                    return response.json()

                except httpx.TimeoutException:
                    logger.warning(f"Google API timeout. Attempt {attempt + 1}/{attempts}")
                    if attempt < attempts - 1:
                        await asyncio.sleep(self.RETRY_DELAY)
                        continue
                    raise GoogleOAuthError("Request timed out", status_code=408)

                except httpx.RequestError as e:
                    logger.error(f"Google API request error: {str(e)}")
                    if attempt < attempts - 1:
                        await asyncio.sleep(self.RETRY_DELAY)
                        continue
                    raise GoogleOAuthError(f"Request failed: {str(e)}")

    async def exchange_code(self, code: str, redirect_uri: str) -> dict:
        """
        Exchange an authorization code for tokens.

        Args:
            code: The authorization code from the OAuth callback
            redirect_uri: Must equal the URI used to build the consent URL

        Returns:
            dict: Token response containing at least ``access_token``

        Raises:
            GoogleOAuthError: If token exchange fails
        """
        logger.info("Exchanging Google authorization code for tokens")

        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }

        # Authorization codes are single-use
        return await self._make_request(method="POST", url=self.token_url, data=data, retry=False)

    async def get_user_info(self, access_token: str) -> dict:
        """
        Fetch the Google profile of the signed-in account.

        Returns:
            dict: OpenID claims; ``sub``, ``email``, ``name`` and ``picture``
                are the ones used here

        Raises:
            GoogleOAuthError: If the request fails
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        profile = await self._make_request(method="GET", url=self.userinfo_url, headers=headers)
        logger.info(f"Fetched Google profile for subject {profile.get('sub')}")
        return profile


# Singleton instance for use across the application
google_service = GoogleOAuthService()
