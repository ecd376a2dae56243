"""
Admin Session Service

Stateless admin sessions. A token carries "{username}:{expiryEpochMillis}" and
an HMAC-SHA256 over that payload:

    base64url(payload) + "." + base64url(hmac(secret, payload))

Padding is stripped from both parts. There is no server-side session table;
a token stays valid until its expiry passes.
"""
import base64
import binascii
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from podsite.config import ADMIN_PASSWORD, ADMIN_USERNAME, SESSION_DURATION, SESSION_SECRET
from podsite.exceptions import TokenDecodeError

SESSION_DURATION_MS = SESSION_DURATION * 1000


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


@dataclass(frozen=True)
class SessionClaims:
    """Decoded session payload."""
    username: str
    expiry_millis: int

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.expiry_millis / 1000, tz=timezone.utc)


class SessionTokenCodec:
    """
    Encode, decode and validate admin session tokens.

    Attributes:
        username: The only username accepted by is_valid()
        duration_ms: Session lifetime in milliseconds
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        username: str = ADMIN_USERNAME,
        duration_ms: int = SESSION_DURATION_MS,
    ):
        if not secret:
            logger.warning(
                "SESSION_SECRET is not set; using an ephemeral key. "
                "Admin sessions will not survive a restart or span processes."
            )
            secret = secrets.token_hex(32)
        self._key = secret.encode("utf-8")
        self.username = username
        self.duration_ms = duration_ms

    def _sign(self, payload: bytes) -> bytes:
        return hmac.new(self._key, payload, hashlib.sha256).digest()

    def encode(self, username: str, now_ms: Optional[int] = None) -> str:
        """
        Create a token for username expiring duration_ms after now_ms.

        Args:
            username: Session subject
            now_ms: Issue time in epoch milliseconds (defaults to now)

        Returns:
            str: Signed token
        """
        issued = now_millis() if now_ms is None else now_ms
        payload = f"{username}:{issued + self.duration_ms}".encode("utf-8")
        return f"{_b64encode(payload)}.{_b64encode(self._sign(payload))}"

    def decode(self, token: str) -> SessionClaims:
        """
        Verify and decode a token.

        Raises:
            TokenDecodeError: Bad encoding, bad signature, or a payload that is
                not exactly one "username:digits" pair
        """
        if not token or token.count(".") != 1:
            raise TokenDecodeError("Malformed session token")

        encoded_payload, encoded_signature = token.split(".")
        try:
            payload = _b64decode(encoded_payload)
            signature = _b64decode(encoded_signature)
        except (binascii.Error, ValueError) as e:
            raise TokenDecodeError("Session token is not valid base64") from e

        if not hmac.compare_digest(signature, self._sign(payload)):
            raise TokenDecodeError("Session token signature mismatch")

        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TokenDecodeError("Session token payload is not UTF-8") from e

        parts = text.split(":")
        if len(parts) != 2 or not (parts[1].isascii() and parts[1].isdigit()):
            raise TokenDecodeError("Session token payload must be 'username:expiry'")

        return SessionClaims(username=parts[0], expiry_millis=int(parts[1]))

    def is_valid(self, token: Optional[str], now_ms: Optional[int] = None) -> bool:
        """True iff the token decodes, names the admin user, and has not expired."""
        return self.claims_if_valid(token, now_ms) is not None

    def claims_if_valid(self, token: Optional[str], now_ms: Optional[int] = None) -> Optional[SessionClaims]:
        """Decoded claims when is_valid() holds, else None."""
        if not token:
            return None
        try:
            claims = self.decode(token)
        except TokenDecodeError:
            return None

        now = now_millis() if now_ms is None else now_ms
        if claims.username != self.username or now >= claims.expiry_millis:
            return None
        return claims


def verify_credentials(username: Optional[str], password: Optional[str]) -> bool:
    """
    Check admin credentials against auth.username and ADMIN_PASSWORD.

    Always False when ADMIN_PASSWORD is unset.
    """
    if not ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD environment variable is not set")
        return False

    username_ok = hmac.compare_digest((username or "").encode("utf-8"), ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest((password or "").encode("utf-8"), ADMIN_PASSWORD.encode("utf-8"))
    is_valid = username_ok and password_ok
    logger.info(f"Admin login attempt: username={username!r}, valid={is_valid}")
    return is_valid


def create_session_codec() -> SessionTokenCodec:
    """Build the process-wide codec from configuration."""
    return SessionTokenCodec(secret=SESSION_SECRET)
