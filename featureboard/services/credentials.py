"""
Bearer credential issuing and verification.

Tokens are HS256 JWTs signed with the startup ``AuthConfig``. The subject ID
travels as the integer ``uid`` claim; the global role as ``role``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from featureboard.config import AuthConfig
from featureboard.errors import InvalidCredential, MissingCredential
from featureboard.models.user import GlobalRole, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """A verified subject, re-derived from the credential on every request."""

    subject_id: int
    email: str
    name: str
    global_role: GlobalRole

    @property
    def is_admin(self) -> bool:
        return self.global_role is GlobalRole.APP_ADMIN


class CredentialVerifier:
    def __init__(self, config: AuthConfig):
        self._config = config

    def issue(self, user: User) -> str:
        """Create a signed JWT for ``user`` with an expiry claim."""
        now = datetime.now(timezone.utc)
        claims = {
            "uid": user.id,
            "email": user.email,
            "name": user.name,
            "role": GlobalRole(user.role).value,
            "iat": now,
            "exp": now + timedelta(minutes=self._config.expire_minutes),
        }
        return jwt.encode(claims, self._config.secret_key, algorithm=self._config.algorithm)

    def verify(self, credential: Optional[str]) -> Identity:
        if not credential or not credential.strip():
            raise MissingCredential()

        try:
            payload = jwt.decode(
                credential.strip(),
                self._config.secret_key,
                algorithms=[self._config.algorithm],
                options={"require_exp": True},
            )
        except ExpiredSignatureError:
            logger.debug("Rejected expired credential")
            raise InvalidCredential("Credential expired")
        except JWTError as exc:
            logger.debug("Rejected credential: %s", exc)
            raise InvalidCredential()

        subject_id = payload.get("uid")
        # bool is an int subclass; a flag is not an ID
        if not isinstance(subject_id, int) or isinstance(subject_id, bool) or subject_id <= 0:
            raise InvalidCredential("Credential carries no subject")

        try:
            role = GlobalRole(payload.get("role"))
        except ValueError:
            raise InvalidCredential("Credential carries an unknown role")

        return Identity(
            subject_id=subject_id,
            email=payload.get("email") or "",
            name=payload.get("name") or "",
            global_role=role,
        )
