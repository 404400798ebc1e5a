"""
Bearer token handling for the session pool API.

A TokenSource produces tokens; TokenCache hands out the current one and
refreshes it shortly before it expires, with at most one refresh in flight.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, runtime_checkable

import jwt

from codesessions.clients import constants
from codesessions.exceptions import TokenAcquisitionError
from codesessions.utils.log import get_logger
from codesessions.utils.utils import get_env, read_token_from_file


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Token:
    value: str
    expires_at: datetime

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks
        return f"Token(value=<redacted>, expires_at={self.expires_at.isoformat()})"


@runtime_checkable
class TokenSource(Protocol):
    """Anything that can asynchronously produce a fresh bearer token."""

    async def fetch_token(self) -> Token:
        ...


def token_from_jwt(raw: str, now: Optional[datetime] = None) -> Token:
    """Build a Token, reading the expiry from the JWT exp claim when present.

    The signature is not verified: the token is only forwarded, never trusted.
    Opaque (non-JWT) tokens get the default lifetime.
    """
    now = now or utcnow()
    try:
        claims = jwt.decode(raw, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError:
        claims = {}

    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    else:
        expires_at = now + constants.DEFAULT_TOKEN_LIFETIME
    return Token(value=raw, expires_at=expires_at)


class StaticTokenSource:
    """Serves a fixed bearer token."""

    def __init__(self, value: str, expires_at: Optional[datetime] = None):
        if not value or not value.strip():
            raise ValueError("Token value cannot be empty.")
        self.value = value.strip()
        self.expires_at = expires_at

    async def fetch_token(self) -> Token:
        if self.expires_at is not None:
            return Token(value=self.value, expires_at=self.expires_at)
        return token_from_jwt(self.value)


class FileTokenSource:
    """Reads a bearer token from a file on every fetch.

    Projected service account tokens are rotated on disk, so the file is
    re-read each time the cache asks for a refresh.
    """

    def __init__(self, path: str):
        self.path = path
        self.logger = get_logger(f"{__name__}.FileTokenSource")

    @classmethod
    def from_env(cls, path: Optional[str] = None) -> "FileTokenSource":
        return cls(path or get_env(constants.TOKEN_FILE_ENV, constants.DEFAULT_TOKEN_PATH))

    async def fetch_token(self) -> Token:
        try:
            raw = await asyncio.to_thread(read_token_from_file, self.path)
        except OSError as e:
            raise TokenAcquisitionError(f"Failed to read token file {self.path}: {e}") from e
        if not raw:
            raise TokenAcquisitionError(f"Token file {self.path} is missing or empty")
        self.logger.debug(f"Loaded token from {self.path}")
        return token_from_jwt(raw)


class TokenCache:
    """Caches the last token from a TokenSource.

    A token is considered stale once it expires within the refresh margin.
    Stale checks run without the lock; the fetch-and-store path is guarded
    by an asyncio.Lock and re-checks staleness after acquiring it, so
    concurrent callers trigger a single fetch. The lock is created on first
    use and replaced when the running event loop changes.
    """

    def __init__(
        self,
        source: TokenSource,
        refresh_margin=constants.TOKEN_REFRESH_MARGIN,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.source = source
        self.refresh_margin = refresh_margin
        self._clock = clock
        self._token: Optional[Token] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self.logger = get_logger(f"{__name__}.TokenCache")

    def _get_lock(self) -> asyncio.Lock:
        # asyncio locks belong to one event loop; a client reused across
        # asyncio.run() calls gets a fresh lock on the new loop
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _is_stale(self) -> bool:
        token = self._token
        return token is None or token.expires_at <= self._clock() + self.refresh_margin

    async def get_token(self) -> str:
        """Return a bearer token valid for at least the refresh margin."""
        if self._is_stale():
            async with self._get_lock():
                if self._is_stale():
                    self.logger.debug("Refreshing authorization token")
                    token = await self.source.fetch_token()
                    self._token = token
                    self.logger.debug(f"Token refreshed, expires at {token.expires_at.isoformat()}")
        return self._token.value

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a new one."""
        self._token = None
