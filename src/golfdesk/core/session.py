"""Session claims and the verifiers that produce them.

A session claim binds an authenticated administrator to a tenant for a
limited time. Components that need the caller's identity depend only on the
``SessionVerifier`` protocol:

    claim = verifier.verify(raw_token)
    if claim is None:
        ...  # missing, forged, or malformed token

Expiry is deliberately not enforced here; it is checked by the authorization
layer and the tenant resolver so that both agree on a single clock.
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import jwt
import structlog
from pydantic import BaseModel, ValidationError

from golfdesk.config.settings import Settings

logger = structlog.get_logger("golfdesk.session")

Clock = Callable[[], float]

DEV_TOKEN_PREFIX = "dev:"


class SessionClaim(BaseModel):
    """Verified identity carried by an administrative session."""

    model_config = {"frozen": True}

    tenant_id: str
    username: str
    exp: int | None = None

    def is_expired(self, now: float) -> bool:
        """A claim without ``exp`` never expires; otherwise it expires once ``exp < now``."""
        return self.exp is not None and self.exp < now


@runtime_checkable
class SessionVerifier(Protocol):
    """Turns a raw session token into a claim, or ``None`` when it is invalid."""

    def verify(self, raw_token: str) -> SessionClaim | None: ...


class SignedSessionVerifier:
    """Issues and verifies HMAC-signed JWT session tokens."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        max_age_seconds: int = 8 * 60 * 60,
        clock: Clock = time.time,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._max_age_seconds = max_age_seconds
        self._clock = clock

    @property
    def max_age_seconds(self) -> int:
        return self._max_age_seconds

    def issue(self, tenant_id: str, username: str) -> str:
        """Issue a token for ``username`` acting within ``tenant_id``."""
        now = int(self._clock())
        payload = {
            "sub": username,
            "tenant_id": tenant_id,
            "username": username,
            "iat": now,
            "exp": now + self._max_age_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, raw_token: str) -> SessionClaim | None:
        if not raw_token:
            return None
        try:
            payload = jwt.decode(
                raw_token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "require": ["tenant_id", "username"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("session_token_rejected", reason=type(e).__name__)
            return None

        try:
            return SessionClaim.model_validate(payload)
        except ValidationError:
            logger.debug("session_token_malformed")
            return None


@dataclass(frozen=True)
class DevUser:
    """Hardcoded demo identity for local development."""

    username: str
    display_name: str


DEV_USERS: dict[str, DevUser] = {
    "member": DevUser(username="dev_member_001", display_name="Taro Tanaka (member)"),
    "guest": DevUser(username="dev_guest_001", display_name="Hanako Yamada (guest)"),
}


class DevSessionVerifier:
    """Lower-trust verifier that accepts ``dev:<user_type>`` tokens.

    Every demo user is bound to a single configured tenant. Only wired in when
    ``DEV_AUTH_ENABLED`` is set.
    """

    def __init__(
        self,
        tenant_id: str,
        *,
        max_age_seconds: int = 8 * 60 * 60,
        clock: Clock = time.time,
    ):
        self._tenant_id = tenant_id
        self._max_age_seconds = max_age_seconds
        self._clock = clock

    @staticmethod
    def token_for(user_type: str) -> str:
        """Build the token for a demo user type.

        Raises:
            KeyError: If ``user_type`` is not a known demo user
        """
        if user_type not in DEV_USERS:
            raise KeyError(user_type)
        return f"{DEV_TOKEN_PREFIX}{user_type}"

    def verify(self, raw_token: str) -> SessionClaim | None:
        if not raw_token or not raw_token.startswith(DEV_TOKEN_PREFIX):
            return None
        user = DEV_USERS.get(raw_token[len(DEV_TOKEN_PREFIX) :])
        if user is None:
            return None
        return SessionClaim(
            tenant_id=self._tenant_id,
            username=user.username,
            exp=int(self._clock()) + self._max_age_seconds,
        )


class ChainedSessionVerifier:
    """Tries each verifier in order and returns the first claim produced."""

    def __init__(self, verifiers: Sequence[SessionVerifier]):
        self._verifiers = tuple(verifiers)

    def verify(self, raw_token: str) -> SessionClaim | None:
        for verifier in self._verifiers:
            claim = verifier.verify(raw_token)
            if claim is not None:
                return claim
        return None


def build_signed_verifier(settings: Settings) -> SignedSessionVerifier | None:
    """Create the JWT verifier, or ``None`` when no secret is configured."""
    if settings.SESSION_SECRET_KEY is None:
        return None
    return SignedSessionVerifier(
        settings.SESSION_SECRET_KEY.get_secret_value(),
        algorithm=settings.SESSION_ALGORITHM,
        max_age_seconds=settings.session_max_age_seconds,
    )


def build_session_verifier(
    settings: Settings,
    signed: SignedSessionVerifier | None = None,
) -> SessionVerifier:
    """Assemble the verifier chain selected by configuration.

    The signed verifier always comes first; the development verifier is
    appended only when ``DEV_AUTH_ENABLED`` and ``DEV_TENANT_ID`` are set.
    """
    verifiers: list[SessionVerifier] = []

    if signed is None:
        signed = build_signed_verifier(settings)
    if signed is not None:
        verifiers.append(signed)

    if settings.DEV_AUTH_ENABLED and settings.DEV_TENANT_ID:
        logger.warning("dev_session_verifier_enabled", tenant_id=settings.DEV_TENANT_ID)
        verifiers.append(
            DevSessionVerifier(
                settings.DEV_TENANT_ID,
                max_age_seconds=settings.session_max_age_seconds,
            )
        )

    return ChainedSessionVerifier(verifiers)
