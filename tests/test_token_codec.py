"""Unit tests for JWT issuance and validation.

Tests for:
- Subject round trip through issue/decode
- Expiry signalled as TokenExpiredError
- Revocation and subject mismatch reported as False
- Malformed and foreign-signed tokens
"""

from datetime import timedelta

import pytest
from jose import jwt
from pydantic import ValidationError

from blogapp.jwt.token_codec import TokenCodec
from blogapp.utils.exceptions import MalformedTokenError, TokenExpiredError


class TestIssueAndDecode:
    def test_issue_generates_non_empty_token(self, codec, principal):
        token = codec.issue(principal)

        assert token
        assert token.count(".") == 2

    def test_decode_returns_original_subject(self, codec, principal):
        token = codec.issue(principal)

        assert codec.decode(token).subject == principal.username
        assert codec.extract_username(token) == principal.username

    def test_claims_carry_issue_and_expiry_seconds(self, codec, principal, clock):
        claims = codec.decode(codec.issue(principal))

        assert claims.iat == int(clock.now.timestamp())
        assert claims.exp == int((clock.now + timedelta(hours=24)).timestamp())
        assert claims.expires_at - claims.issued_at == timedelta(hours=24)

    def test_issue_is_deterministic_for_fixed_clock(self, codec, principal):
        assert codec.issue(principal) == codec.issue(principal)

    def test_claims_are_immutable(self, codec, principal):
        claims = codec.decode(codec.issue(principal))

        with pytest.raises(ValidationError):
            claims.sub = "someone-else"

    def test_decode_ignores_expiry(self, registry, principal, clock):
        expired_codec = TokenCodec(
            "x" * 32, timedelta(milliseconds=-1000), registry, clock=clock
        )
        token = expired_codec.issue(principal)

        assert expired_codec.decode(token).subject == principal.username

    def test_decode_accepts_token_expired_by_wall_clock(self, registry, principal):
        wall_clock_codec = TokenCodec("x" * 32, timedelta(seconds=-5), registry)
        token = wall_clock_codec.issue(principal)

        claims = wall_clock_codec.decode(token)

        assert claims.subject == principal.username
        assert claims.exp < claims.iat

    def test_decode_ignores_revocation(self, codec, registry, principal):
        token = codec.issue(principal)
        registry.revoke(token)

        assert codec.decode(token).subject == principal.username


class TestMalformedTokens:
    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", "Bearer xyz"])
    def test_garbage_is_malformed(self, codec, token):
        with pytest.raises(MalformedTokenError):
            codec.decode(token)

    def test_token_signed_with_other_secret_is_malformed(self, codec, principal, registry, clock):
        foreign = TokenCodec("y" * 40, timedelta(hours=1), registry, clock=clock)

        with pytest.raises(MalformedTokenError):
            codec.decode(foreign.issue(principal))

    def test_tampered_payload_is_malformed(self, codec, principal, other_principal):
        header, _, signature = codec.issue(principal).split(".")
        _, forged_payload, _ = codec.issue(other_principal).split(".")

        with pytest.raises(MalformedTokenError):
            codec.decode(f"{header}.{forged_payload}.{signature}")

    def test_missing_expiry_claim_is_malformed(self, registry, clock):
        secret = "z" * 32
        codec = TokenCodec(secret, timedelta(hours=1), registry, clock=clock)
        token = jwt.encode({"sub": "testuser", "iat": 1}, secret, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            codec.decode(token)

    def test_is_valid_propagates_malformed(self, codec, principal):
        with pytest.raises(MalformedTokenError):
            codec.is_valid("garbage", principal)


class TestIsValid:
    def test_fresh_token_is_valid(self, codec, principal):
        assert codec.is_valid(codec.issue(principal), principal) is True

    def test_other_principal_is_not_valid(self, codec, principal, other_principal):
        token = codec.issue(principal)

        assert codec.is_valid(token, other_principal) is False

    def test_revoked_token_is_not_valid(self, codec, registry, principal):
        token = codec.issue(principal)
        registry.revoke(token)

        assert codec.is_valid(token, principal) is False

    def test_expired_token_raises(self, registry, principal, clock):
        expired_codec = TokenCodec(
            "x" * 32, timedelta(milliseconds=-1000), registry, clock=clock
        )
        token = expired_codec.issue(principal)

        with pytest.raises(TokenExpiredError):
            expired_codec.is_valid(token, principal)

    def test_expired_by_wall_clock_raises_expired_not_malformed(self, registry, principal):
        wall_clock_codec = TokenCodec("x" * 32, timedelta(seconds=-5), registry)

        with pytest.raises(TokenExpiredError):
            wall_clock_codec.is_valid(wall_clock_codec.issue(principal), principal)

    def test_frozen_clock_in_the_past_keeps_token_valid(self, codec, principal, clock):
        assert clock.now.year == 2025
        assert codec.is_valid(codec.issue(principal), principal) is True

    def test_zero_ttl_token_is_expired_immediately(self, registry, principal, clock):
        zero_codec = TokenCodec("x" * 32, timedelta(0), registry, clock=clock)

        with pytest.raises(TokenExpiredError):
            zero_codec.is_valid(zero_codec.issue(principal), principal)

    def test_token_expires_once_clock_reaches_expiry(self, codec, principal, clock):
        token = codec.issue(principal)

        clock.advance(timedelta(hours=24) - timedelta(seconds=1))
        assert codec.is_valid(token, principal) is True

        clock.advance(timedelta(seconds=1))
        with pytest.raises(TokenExpiredError):
            codec.is_valid(token, principal)

    def test_expiry_wins_over_revocation(self, codec, registry, principal, clock):
        token = codec.issue(principal)
        registry.revoke(token)
        clock.advance(timedelta(days=2))

        with pytest.raises(TokenExpiredError):
            codec.is_valid(token, principal)
