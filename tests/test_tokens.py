"""
Tests for login token signing and verification.
"""

import time
from datetime import timedelta
from unittest.mock import patch

import jwt
import pytest

from auth import tokens
from auth.errors import ConfigurationError, TokenGenerationError
from auth.tokens import create_token, decode_token
from config.settings import config


@pytest.fixture(autouse=True)
def _secret(monkeypatch):
    monkeypatch.setattr(config, "jwt_secret", "unit-test-secret-with-enough-length")


class TestCreateToken:
    def test_claims_carry_user_id_and_username(self):
        token = create_token("1234", "alice")
        claims = decode_token(token)
        assert claims["user"] == {"id": "1234", "username": "alice"}

    def test_expires_one_hour_after_issue(self):
        before = int(time.time())
        claims = decode_token(create_token("1234", "alice"))
        after = int(time.time())
        assert claims["exp"] - claims["iat"] == 3600
        assert before + 3600 <= claims["exp"] <= after + 3600

    def test_signed_with_hs256(self):
        header = jwt.get_unverified_header(create_token("1234", "alice"))
        assert header["alg"] == "HS256"

    def test_missing_secret_is_configuration_error(self, monkeypatch):
        monkeypatch.setattr(config, "jwt_secret", "")
        with pytest.raises(ConfigurationError):
            create_token("1234", "alice")

    def test_signing_failure_is_token_generation_error(self):
        with patch.object(tokens.jwt, "encode", side_effect=jwt.PyJWTError("boom")):
            with pytest.raises(TokenGenerationError):
                create_token("1234", "alice")


class TestDecodeToken:
    def test_wrong_secret_rejected(self):
        token = create_token("1234", "alice")
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, "another-secret-with-enough-length", algorithms=["HS256"])

    def test_expired_token_rejected(self, monkeypatch):
        monkeypatch.setattr(tokens, "TOKEN_LIFETIME", timedelta(seconds=-30))
        token = create_token("1234", "alice")
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_token("not.a.token")
