"""
Authentication router — OAuth sign-in (Google, GitHub) issuing bearer tokens.

Endpoints:
    GET  /auth/login/{provider}    → redirect to OAuth consent screen
    GET  /auth/callback/{provider} → find or create the user, return a bearer token
    GET  /auth/profile             → the caller's profile and board roles
"""

import logging

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from featureboard.database import get_db
from featureboard.errors import InvalidCredential, NotFound, ValidationError
from featureboard.repositories.users import get_board_roles, get_user
from featureboard.schemas.user import ProfileOut, TokenOut
from featureboard.services.credentials import CredentialVerifier
from featureboard.services.guard import AuthContext, get_verifier, require
from featureboard.services.oauth import VALID_PROVIDERS, fetch_profile, oauth, sign_in
from featureboard.services.roles import ANY_MEMBER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login/{provider}")
async def oauth_login(provider: str, request: Request):
    """Redirect the user to the provider's OAuth consent screen."""
    if provider not in VALID_PROVIDERS:
        raise ValidationError(f"Unknown provider: {provider}")

    client = oauth.create_client(provider)
    redirect_uri = request.url_for("oauth_callback", provider=provider)
    return await client.authorize_redirect(request, str(redirect_uri))


@router.get("/callback/{provider}", response_model=TokenOut)
async def oauth_callback(
    provider: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_verifier),
):
    """Handle the OAuth callback — find or create the user, return a signed token."""
    if provider not in VALID_PROVIDERS:
        raise ValidationError(f"Unknown provider: {provider}")

    client = oauth.create_client(provider)
    try:
        token = await client.authorize_access_token(request)
    except OAuthError as exc:
        logger.info("OAuth callback from %s rejected: %s", provider, exc.error)
        raise InvalidCredential(f"Authentication failed: {exc.error}")

    profile = await fetch_profile(provider, token, client)
    user = await sign_in(db, provider, profile)
    if user is None:
        raise ValidationError(
            "Could not retrieve your email from the provider. Please try a different sign-in method."
        )
    await db.commit()

    return TokenOut(token=verifier.issue(user), name=user.name, email=user.email)


@router.get("/profile", response_model=ProfileOut)
async def profile(
    ctx: AuthContext = Depends(require(ANY_MEMBER)),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user(db, ctx.identity.subject_id)
    if user is None:
        raise NotFound("User not found")

    board_roles = await get_board_roles(db, user.id)
    return ProfileOut(
        id=user.id,
        email=user.email,
        name=user.name,
        picture=user.picture,
        role=user.role.value,
        board_roles={board_id: role.value for board_id, role in board_roles.items()},
    )
