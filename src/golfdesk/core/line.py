"""LINE Login (OAuth 2.1) client used to identify booking users."""

from urllib.parse import urlencode

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from golfdesk.config.settings import Settings
from golfdesk.core.exceptions import LineLoginError

logger = structlog.get_logger("golfdesk.line")

AUTHORIZE_URL = "https://access.line.me/oauth2/v2.1/authorize"
TOKEN_URL = "https://api.line.me/oauth2/v2.1/token"
PROFILE_URL = "https://api.line.me/v2/profile"
SCOPE = "profile openid"


class LineProfile(BaseModel):
    userId: str
    displayName: str
    pictureUrl: str | None = None


class LineLoginClient:
    """Authorization-code flow against the LINE platform.

    Example:
        async with LineLoginClient.from_settings(settings) as client:
            token = await client.exchange_code(code)
            profile = await client.fetch_profile(token)
    """

    def __init__(
        self,
        channel_id: str,
        channel_secret: str,
        redirect_uri: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.channel_id = channel_id
        self.channel_secret = channel_secret
        self.redirect_uri = redirect_uri
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "LineLoginClient":
        secret = settings.LINE_CHANNEL_SECRET
        return cls(
            settings.LINE_CHANNEL_ID or "",
            secret.get_secret_value() if secret else "",
            settings.line_callback_url,
            transport=transport,
        )

    async def __aenter__(self) -> "LineLoginClient":
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def authorize_url(self, state: str) -> str:
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.channel_id,
                "redirect_uri": self.redirect_uri,
                "state": state,
                "scope": SCOPE,
            }
        )
        return f"{AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token.

        Raises:
            LineLoginError: ``token_error`` if LINE returns no access token,
                ``auth_failed`` on transport or decoding failures
        """
        try:
            response = await self._http.post(
                TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                    "client_id": self.channel_id,
                    "client_secret": self.channel_secret,
                },
            )
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("line_token_request_failed", error_type=type(e).__name__)
            raise LineLoginError("auth_failed", str(e)) from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            logger.warning("line_token_missing", status_code=response.status_code)
            raise LineLoginError("token_error")
        return access_token

    async def fetch_profile(self, access_token: str) -> LineProfile:
        """Raises LineLoginError(``auth_failed``) if the profile cannot be read."""
        try:
            response = await self._http.get(
                PROFILE_URL, headers={"Authorization": f"Bearer {access_token}"}
            )
            response.raise_for_status()
            return LineProfile.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning("line_profile_request_failed", error_type=type(e).__name__)
            raise LineLoginError("auth_failed", str(e)) from e

    @property
    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("LineLoginClient must be used as an async context manager")
        return self._client
