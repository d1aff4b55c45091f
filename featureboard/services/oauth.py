"""
OAuth sign-in — provider clients and the find-or-create account policy.
"""

import logging
from typing import Optional

from authlib.integrations.starlette_client import OAuth
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.config import settings
from featureboard.models.user import GlobalRole, User
from featureboard.repositories.users import create_user, find_user_by_email, find_user_by_oauth

logger = logging.getLogger(__name__)

oauth = OAuth()

# ── Google ──
oauth.register(
    name="google",
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)

# ── GitHub ──
oauth.register(
    name="github",
    client_id=settings.GITHUB_CLIENT_ID,
    client_secret=settings.GITHUB_CLIENT_SECRET,
    access_token_url="https://github.com/login/oauth/access_token",
    authorize_url="https://github.com/login/oauth/authorize",
    api_base_url="https://api.github.com/",
    client_kwargs={"scope": "user:email"},
)

VALID_PROVIDERS = {"google", "github"}


async def fetch_profile(provider: str, token: dict, client) -> dict:
    """
    Fetch the user's profile from the OAuth provider.
    Returns dict with keys: email, name, picture, oauth_id
    """
    if provider == "google":
        userinfo = token.get("userinfo") or {}
        return {
            "email": userinfo.get("email"),
            "name": userinfo.get("name", ""),
            "picture": userinfo.get("picture"),
            "oauth_id": userinfo.get("sub"),
        }

    if provider == "github":
        resp = await client.get("user", token=token)
        profile = resp.json()

        # GitHub may leave email out of the profile
        email = profile.get("email")
        if not email:
            emails_resp = await client.get("user/emails", token=token)
            primary = next((e for e in emails_resp.json() if e.get("primary")), None)
            email = primary["email"] if primary else None

        return {
            "email": email,
            "name": profile.get("name") or profile.get("login", ""),
            "picture": profile.get("avatar_url"),
            "oauth_id": str(profile.get("id")),
        }

    return {}


def _initial_role(email: str) -> GlobalRole:
    admins = {e.strip().lower() for e in settings.BOOTSTRAP_ADMIN_EMAILS}
    return GlobalRole.APP_ADMIN if email.strip().lower() in admins else GlobalRole.USER


async def sign_in(db: AsyncSession, provider: str, profile: dict) -> Optional[User]:
    """
    Resolve an OAuth profile to an account: by provider identity, then by
    email (linking the provider), else a new ``user`` account. Returns None
    when the profile lacks an email or provider ID.
    """
    email = profile.get("email")
    oauth_id = profile.get("oauth_id")
    if not email or not oauth_id:
        return None

    user = await find_user_by_oauth(db, provider, oauth_id)
    if user:
        return user

    user = await find_user_by_email(db, email)
    if user:
        user.oauth_provider = provider
        user.oauth_id = oauth_id
        if profile.get("picture"):
            user.picture = profile["picture"]
        await db.flush()
        logger.info("Linked %s sign-in to user %s", provider, user.id)
        return user

    user = await create_user(
        db,
        email=email,
        name=profile.get("name") or email.split("@")[0],
        role=_initial_role(email),
        oauth_provider=provider,
        oauth_id=oauth_id,
        picture=profile.get("picture"),
    )
    logger.info("Created user %s via %s with role %s", user.id, provider, user.role.value)
    return user
