"""
Featureboard — FastAPI application entry-point.

Run with:
    uvicorn featureboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from featureboard import __version__
from featureboard.config import AuthConfig, settings
from featureboard.database import Base, async_session, engine
from featureboard.errors import register_error_handlers
from featureboard.observability import init_logging
from featureboard.repositories.categories import ensure_default_categories
from featureboard.services.credentials import CredentialVerifier

# ── Import models & routers ──
from featureboard import models  # noqa: F401
from featureboard.routers import admin, auth, boards, categories, comments, feedback

logger = logging.getLogger(__name__)

init_logging(settings.LOG_LEVEL)


# ── Lifespan: create tables and default categories on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session() as db:
        added = await ensure_default_categories(db)
        await db.commit()
    if added:
        logger.info("Seeded %d default categories", added)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Feedback boards with role-scoped voting, comments and reactions.",
    version=__version__,
    lifespan=lifespan,
)

# ── Credential verifier, built once from read-only config ──
app.state.verifier = CredentialVerifier(AuthConfig.from_settings(settings))

# ── Session middleware (required for OAuth state) ──
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, https_only=not settings.DEBUG)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

register_error_handlers(app)

# ── Register API routers ──
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(boards.router)
app.include_router(feedback.router)
app.include_router(comments.router)
app.include_router(categories.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
