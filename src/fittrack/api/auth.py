"""Auth API — registration, login, current identity.

Learn: Routes for the stateless token flow:
- POST /auth/register → create an account, returns a token straight away
- POST /auth/login → email-or-username + password → token
- GET /auth/me → whoever the bearer token says you are

Register and login are open routes. /me opts into auth per-route with
Depends(get_current_identity) since the rest of this router is public.
Error details are generic on purpose; the service logs the specifics.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.auth.dependencies import AuthenticatedIdentity, get_current_identity
from fittrack.auth.errors import DuplicateIdentity, InvalidCredentials
from fittrack.auth.store import SqlAlchemyCredentialStore
from fittrack.db.engine import get_db
from fittrack.services.auth_service import AuthResult, AuthService

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: str = Field(min_length=5, max_length=25)
    email: str = Field(max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email_or_username: str = Field(alias="emailOrUsername", min_length=1)
    password: str = Field(min_length=1)

    model_config = {"populate_by_name": True}


class AuthResponse(BaseModel):
    token: str
    user_id: int = Field(alias="userId")
    username: str
    email: str

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(
            token=result.token,
            user_id=result.user_id,
            username=result.username,
            email=result.email,
        )


# ─── Dependencies ───────────────────────────────────────


def get_auth_service(
    request: Request, db: AsyncSession = Depends(get_db)
) -> AuthService:
    return AuthService(
        store=SqlAlchemyCredentialStore(db),
        codec=request.app.state.token_codec,
        hasher=request.app.state.password_hasher,
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest, service: AuthService = Depends(get_auth_service)
):
    """Create a new user account and log it in."""
    try:
        result = await service.register(body.username, body.email, body.password)
    except DuplicateIdentity:
        raise HTTPException(status_code=400, detail="Username or email already in use")
    return AuthResponse.from_result(result)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Login with email or username and password → JWT token."""
    try:
        result = await service.login(body.email_or_username, body.password)
    except InvalidCredentials:
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthResponse.from_result(result)


# ─── Current identity ───────────────────────────────────


@router.get("/me")
async def get_me(identity: AuthenticatedIdentity = Depends(get_current_identity)):
    """Get the caller's identity as established by the bearer token."""
    return {"username": identity.username}
