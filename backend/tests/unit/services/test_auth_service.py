"""
Unit tests for the admin session service.
"""
import pytest

from podsite.exceptions import TokenDecodeError
from podsite.services import auth_service
from podsite.services.auth_service import SessionTokenCodec, _b64encode, verify_credentials

DAY_MS = 86_400_000
T0 = 1_700_000_000_000


class TestSessionTokenCodec:
    """Test encode / decode / is_valid"""

    def test_token_valid_until_expiry(self, codec):
        """
        Given: A token issued at T0 for the admin user
        When: Checking validity around the 24h boundary
        Then: Valid at T0 and T0+24h-1ms, invalid at T0+24h
        """
        token = codec.encode("admin-1", now_ms=T0)

        assert codec.is_valid(token, now_ms=T0)
        assert codec.is_valid(token, now_ms=T0 + DAY_MS - 1)
        assert not codec.is_valid(token, now_ms=T0 + DAY_MS)

    def test_decode_returns_claims(self, codec):
        token = codec.encode("admin-1", now_ms=T0)

        claims = codec.decode(token)

        assert claims.username == "admin-1"
        assert claims.expiry_millis == T0 + DAY_MS
        assert claims.expires_at.year == 2023

    def test_token_format(self, codec):
        token = codec.encode("admin-1", now_ms=T0)

        payload, signature = token.split(".")
        assert payload == _b64encode(f"admin-1:{T0 + DAY_MS}".encode())
        assert "=" not in token

    def test_other_username_is_invalid(self, codec):
        token = codec.encode("someone-else", now_ms=T0)

        assert not codec.is_valid(token, now_ms=T0)

    def test_tampered_payload_is_invalid(self, codec):
        """
        Given: A token whose payload is swapped for a later expiry
        When: Validating it
        Then: The signature no longer matches
        """
        token = codec.encode("admin-1", now_ms=T0)
        _, signature = token.split(".")
        forged = f"{_b64encode(f'admin-1:{T0 + 10 * DAY_MS}'.encode())}.{signature}"

        with pytest.raises(TokenDecodeError):
            codec.decode(forged)
        assert not codec.is_valid(forged, now_ms=T0)

    def test_token_from_other_secret_is_invalid(self, codec):
        other = SessionTokenCodec(secret="another-secret")
        token = other.encode("admin-1", now_ms=T0)

        assert not codec.is_valid(token, now_ms=T0)

    @pytest.mark.parametrize("token", [
        "",
        "no-dot-at-all",
        "a.b.c",
        "abc.",
        "héllo.wörld",
    ])
    def test_malformed_tokens_rejected(self, codec, token):
        assert not codec.is_valid(token, now_ms=T0)

    @pytest.mark.parametrize("payload", [
        "admin-1",
        "admin-1:",
        "admin-1:12:34",
        "admin-1:12a",
        "admin-1:-5",
    ])
    def test_signed_but_malformed_payload_rejected(self, codec, payload):
        """
        Given: A correctly signed payload that is not 'username:digits'
        When: Decoding it
        Then: TokenDecodeError
        """
        raw = payload.encode("utf-8")
        token = f"{_b64encode(raw)}.{_b64encode(codec._sign(raw))}"

        with pytest.raises(TokenDecodeError):
            codec.decode(token)

    def test_none_token_is_invalid(self, codec):
        assert codec.claims_if_valid(None) is None

    def test_missing_secret_uses_ephemeral_key(self):
        first = SessionTokenCodec(secret=None)
        second = SessionTokenCodec(secret=None)
        token = first.encode("admin-1", now_ms=T0)

        assert first.is_valid(token, now_ms=T0)
        assert not second.is_valid(token, now_ms=T0)


class TestVerifyCredentials:
    """Test verify_credentials"""

    def test_correct_credentials(self, monkeypatch):
        monkeypatch.setattr(auth_service, "ADMIN_PASSWORD", "s3cret")

        assert verify_credentials("admin-1", "s3cret")

    @pytest.mark.parametrize("username,password", [
        ("admin-1", "wrong"),
        ("admin", "s3cret"),
        (None, "s3cret"),
        ("admin-1", None),
    ])
    def test_wrong_credentials(self, monkeypatch, username, password):
        monkeypatch.setattr(auth_service, "ADMIN_PASSWORD", "s3cret")

        assert not verify_credentials(username, password)

    def test_unset_password_rejects_everything(self, monkeypatch):
        monkeypatch.setattr(auth_service, "ADMIN_PASSWORD", None)

        assert not verify_credentials("admin-1", "")
