"""Tests for bearer credential issuing and verification."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from featureboard.config import AuthConfig
from featureboard.errors import InvalidCredential, MissingCredential
from featureboard.models.user import GlobalRole, User
from featureboard.services.credentials import CredentialVerifier

CONFIG = AuthConfig(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def verifier():
    return CredentialVerifier(CONFIG)


@pytest.fixture
def user():
    return User(id=42, email="ada@example.com", name="Ada", role=GlobalRole.STAKEHOLDER)


def _sign(claims: dict, secret: str = CONFIG.secret_key) -> str:
    now = datetime.now(timezone.utc)
    payload = {"iat": now, "exp": now + timedelta(minutes=5)}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


class TestIssueAndVerify:
    def test_round_trip_preserves_identity(self, verifier, user):
        identity = verifier.verify(verifier.issue(user))

        assert identity.subject_id == 42
        assert identity.email == "ada@example.com"
        assert identity.name == "Ada"
        assert identity.global_role is GlobalRole.STAKEHOLDER
        assert identity.is_admin is False

    def test_subject_id_is_an_integer_claim(self, verifier, user):
        claims = jwt.get_unverified_claims(verifier.issue(user))
        assert claims["uid"] == 42
        assert isinstance(claims["uid"], int)

    def test_surrounding_whitespace_is_ignored(self, verifier, user):
        assert verifier.verify(f"  {verifier.issue(user)} ").subject_id == 42


class TestRejections:
    @pytest.mark.parametrize("credential", [None, "", "   "])
    def test_missing_credential(self, verifier, credential):
        with pytest.raises(MissingCredential):
            verifier.verify(credential)

    def test_garbage_token(self, verifier):
        with pytest.raises(InvalidCredential):
            verifier.verify("not-a-jwt")

    def test_wrong_signature(self, verifier):
        token = _sign({"uid": 1, "role": "user"}, secret="someone-else")
        with pytest.raises(InvalidCredential):
            verifier.verify(token)

    def test_expired_token(self, user):
        expired = CredentialVerifier(AuthConfig("test-secret", "HS256", expire_minutes=-5))
        token = expired.issue(user)
        with pytest.raises(InvalidCredential, match="expired"):
            CredentialVerifier(CONFIG).verify(token)

    def test_token_without_expiry(self, verifier):
        token = jwt.encode({"uid": 1, "role": "user"}, CONFIG.secret_key, algorithm="HS256")
        with pytest.raises(InvalidCredential):
            verifier.verify(token)

    @pytest.mark.parametrize("uid", ["42", None, 0, -3, True, 4.2])
    def test_non_integer_subject(self, verifier, uid):
        with pytest.raises(InvalidCredential):
            verifier.verify(_sign({"uid": uid, "role": "user"}))

    def test_unknown_role(self, verifier):
        with pytest.raises(InvalidCredential):
            verifier.verify(_sign({"uid": 1, "role": "superuser"}))
