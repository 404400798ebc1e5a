import asyncio
import os
import tempfile
import unittest
from unittest.mock import patch
from datetime import datetime, timedelta, timezone

import jwt

from codesessions.clients.auth import (
    FileTokenSource,
    StaticTokenSource,
    Token,
    TokenCache,
    TokenSource,
    token_from_jwt,
)
from codesessions.exceptions import TokenAcquisitionError

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class CountingTokenSource:
    """Issues numbered tokens that expire `lifetime` after NOW."""

    def __init__(self, lifetime: timedelta, fail_first: bool = False):
        self.lifetime = lifetime
        self.fail_first = fail_first
        self.calls = 0

    async def fetch_token(self) -> Token:
        self.calls += 1
        # Yield so concurrent callers can pile up on the lock
        await asyncio.sleep(0)
        if self.fail_first and self.calls == 1:
            raise TokenAcquisitionError("identity endpoint unavailable")
        return Token(value=f"token-{self.calls}", expires_at=NOW + self.lifetime)


class TestTokenCache(unittest.IsolatedAsyncioTestCase):

    def make_cache(self, source):
        return TokenCache(source, clock=lambda: NOW)

    async def test_concurrent_calls_on_empty_cache_fetch_once(self):
        source = CountingTokenSource(timedelta(hours=1))
        cache = self.make_cache(source)

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(5)))

        self.assertEqual(source.calls, 1)
        self.assertEqual(set(tokens), {"token-1"})

    async def test_fresh_token_is_reused(self):
        source = CountingTokenSource(timedelta(minutes=10))
        cache = self.make_cache(source)

        self.assertEqual(await cache.get_token(), "token-1")
        self.assertEqual(await cache.get_token(), "token-1")

        self.assertEqual(source.calls, 1)

    async def test_token_inside_refresh_margin_is_refetched(self):
        source = CountingTokenSource(timedelta(minutes=4))
        cache = self.make_cache(source)

        await cache.get_token()
        self.assertEqual(await cache.get_token(), "token-2")

        self.assertEqual(source.calls, 2)

    async def test_token_expiring_exactly_at_margin_is_stale(self):
        source = CountingTokenSource(timedelta(minutes=5))
        cache = self.make_cache(source)

        await cache.get_token()
        await cache.get_token()

        self.assertEqual(source.calls, 2)

    async def test_fetch_failure_propagates_and_releases_lock(self):
        source = CountingTokenSource(timedelta(hours=1), fail_first=True)
        cache = self.make_cache(source)

        with self.assertRaises(TokenAcquisitionError):
            await cache.get_token()

        self.assertFalse(cache._lock.locked())
        self.assertEqual(await cache.get_token(), "token-2")

    async def test_invalidate_forces_refetch(self):
        source = CountingTokenSource(timedelta(hours=1))
        cache = self.make_cache(source)

        await cache.get_token()
        cache.invalidate()

        self.assertEqual(await cache.get_token(), "token-2")


class TestTokenCacheAcrossEventLoops(unittest.TestCase):

    def test_cache_is_usable_from_successive_event_loops(self):
        """A cache contended in one asyncio.run() still works in the next."""
        source = CountingTokenSource(timedelta(hours=1))
        cache = TokenCache(source, clock=lambda: NOW)

        async def contend():
            return await asyncio.gather(cache.get_token(), cache.get_token())

        self.assertEqual(asyncio.run(contend()), ["token-1", "token-1"])
        cache.invalidate()
        self.assertEqual(asyncio.run(contend()), ["token-2", "token-2"])

        self.assertEqual(source.calls, 2)


class TestTokenFromJwt(unittest.TestCase):

    def test_reads_exp_claim(self):
        exp = int((NOW + timedelta(minutes=30)).timestamp())
        raw = jwt.encode({"sub": "sdk", "exp": exp}, "secret", algorithm="HS256")

        token = token_from_jwt(raw, now=NOW)

        self.assertEqual(token.value, raw)
        self.assertEqual(token.expires_at, NOW + timedelta(minutes=30))

    def test_expired_jwt_is_still_decoded(self):
        exp = int((NOW - timedelta(days=1)).timestamp())
        raw = jwt.encode({"exp": exp}, "secret", algorithm="HS256")

        self.assertEqual(token_from_jwt(raw, now=NOW).expires_at, NOW - timedelta(days=1))

    def test_opaque_token_gets_default_lifetime(self):
        token = token_from_jwt("not-a-jwt", now=NOW)
        self.assertEqual(token.expires_at, NOW + timedelta(hours=1))

    def test_repr_hides_value(self):
        token = Token(value="super-secret", expires_at=NOW)
        self.assertNotIn("super-secret", repr(token))


class TestStaticTokenSource(unittest.IsolatedAsyncioTestCase):

    async def test_explicit_expiry(self):
        source = StaticTokenSource("abc", expires_at=NOW)
        self.assertEqual(await source.fetch_token(), Token("abc", NOW))

    async def test_is_a_token_source(self):
        self.assertIsInstance(StaticTokenSource("abc"), TokenSource)

    def test_empty_value_rejected(self):
        with self.assertRaises(ValueError):
            StaticTokenSource("  ")


class TestFileTokenSource(unittest.IsolatedAsyncioTestCase):

    async def test_reads_token_file(self):
        exp = int((NOW + timedelta(hours=2)).timestamp())
        raw = jwt.encode({"exp": exp}, "secret", algorithm="HS256")
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "token")
            with open(path, "w") as f:
                f.write(raw + "\n")

            token = await FileTokenSource(path).fetch_token()

        self.assertEqual(token.value, raw)
        self.assertEqual(token.expires_at, NOW + timedelta(hours=2))

    async def test_missing_file_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = FileTokenSource(os.path.join(tmp, "absent"))
            with self.assertRaises(TokenAcquisitionError):
                await source.fetch_token()

    def test_from_env_uses_token_file_variable(self):
        with patch.dict(os.environ, {"CODESESSIONS_TOKEN_FILE": "/tmp/tok"}):
            self.assertEqual(FileTokenSource.from_env().path, "/tmp/tok")


if __name__ == "__main__":
    unittest.main()
