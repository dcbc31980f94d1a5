"""Tests for the in-memory revocation registry and its cleanup loop."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from blogapp.jwt.blocklist import RevocationRegistry, strip_bearer_prefix
from blogapp.jwt.revocation_sweep import revocation_sweep_loop


def test_revoked_token_is_reported(registry, codec, principal):
    token = codec.issue(principal)

    registry.revoke(token)

    assert registry.is_revoked(token)


def test_unrevoked_token_is_not_reported(registry, codec, principal):
    assert not registry.is_revoked(codec.issue(principal))


def test_bearer_prefix_is_stripped_only_at_revoke_time(registry, codec, principal):
    token = codec.issue(principal)

    stored = registry.revoke("Bearer " + token)

    assert stored == token
    assert registry.is_revoked(token) is True
    assert registry.is_revoked("Bearer " + token) is False


def test_prefix_is_stripped_once():
    registry = RevocationRegistry()

    registry.revoke("Bearer Bearer abc")

    assert registry.is_revoked("Bearer abc")
    assert not registry.is_revoked("abc")


def test_strip_bearer_prefix_is_case_sensitive():
    assert strip_bearer_prefix("Bearer abc") == "abc"
    assert strip_bearer_prefix("bearer abc") == "bearer abc"
    assert strip_bearer_prefix("abc") == "abc"


def test_revoke_is_idempotent(registry):
    registry.revoke("abc")
    registry.revoke("abc")
    registry.revoke("Bearer abc")

    assert len(registry) == 1


def test_concurrent_revocations_are_not_lost():
    registry = RevocationRegistry()
    tokens = [f"token-{i}" for i in range(500)]

    with ThreadPoolExecutor(max_workers=32) as pool:
        list(pool.map(registry.revoke, tokens))

    assert len(registry) == len(tokens)
    assert all(registry.is_revoked(token) for token in tokens)


def test_concurrent_revoke_and_lookup():
    registry = RevocationRegistry()
    tokens = [f"token-{i}" for i in range(200)]

    def revoke_then_check(token):
        registry.revoke(token)
        return registry.is_revoked(token)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(revoke_then_check, tokens))

    assert all(results)


def test_purge_removes_only_expired_entries():
    registry = RevocationRegistry()
    now = datetime(2025, 6, 1, tzinfo=timezone.utc)
    registry.revoke("expired", now - timedelta(seconds=1))
    registry.revoke("expiring-now", now)
    registry.revoke("live", now + timedelta(hours=1))
    registry.revoke("unknown-expiry")

    removed = registry.purge_expired(now)

    assert removed == 2
    assert not registry.is_revoked("expired")
    assert not registry.is_revoked("expiring-now")
    assert registry.is_revoked("live")
    assert registry.is_revoked("unknown-expiry")


def test_known_expiry_is_kept_on_repeat_revoke():
    registry = RevocationRegistry()
    past = datetime(2020, 1, 1, tzinfo=timezone.utc)
    registry.revoke("abc", past)
    registry.revoke("abc")

    assert registry.purge_expired(datetime(2025, 1, 1, tzinfo=timezone.utc)) == 1


async def test_sweep_loop_purges_and_stops_on_cancel():
    registry = RevocationRegistry()
    registry.revoke("old", datetime(2020, 1, 1, tzinfo=timezone.utc))
    registry.revoke("fresh", datetime.now(timezone.utc) + timedelta(hours=1))

    task = asyncio.create_task(revocation_sweep_loop(registry, interval_seconds=0))
    for _ in range(10):
        await asyncio.sleep(0)
    task.cancel()
    await task

    assert not registry.is_revoked("old")
    assert registry.is_revoked("fresh")
    assert task.done()
