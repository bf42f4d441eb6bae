"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything stateful (settings, token codec, password hasher,
database engine) is built here from one Settings object and stored on
app.state. Nothing is read from module-level globals at request time.

The token codec is constructed before the app exists, so a missing or
weak FITTRACK_JWT_SECRET aborts startup with ConfigurationError instead
of failing on the first login.

Run with: uvicorn fittrack.main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fittrack import __version__
from fittrack.api import api_router
from fittrack.auth.jwt import TokenCodec
from fittrack.auth.password import PasswordHasher
from fittrack.config import Settings, load_settings
from fittrack.db.engine import build_engine, build_session_factory

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "fittrack.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        token_ttl_ms=settings.jwt_expiration_ms,
    )

    yield

    logger.info("fittrack.shutdown")
    await app.state.engine.dispose()


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report body validation failures as 400, like the other client errors."""
    logger.info("request.invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Drop "input", it would echo submitted passwords back to the client
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or load_settings()

    # Fails fast on a missing/weak secret
    codec = TokenCodec(settings)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    engine = build_engine(settings)

    app = FastAPI(
        title="FitTrack",
        description="Fitness tracking API — accounts, tokens and workouts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_codec = codec
    app.state.password_hasher = hasher
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → AuthGate → handler

    from fittrack.middleware.authentication import AuthenticationGateMiddleware
    from fittrack.middleware.request_id import RequestIdMiddleware
    from fittrack.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(AuthenticationGateMiddleware, codec=codec)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(api_router)

    return app
