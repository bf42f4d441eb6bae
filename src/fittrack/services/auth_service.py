"""Auth service — registration and login.

Learn: Two independent request/response operations, no session state:
1. register → uniqueness checks → bcrypt hash → persist → issue token
2. login → lookup by email, then username → bcrypt verify → issue token

bcrypt is CPU-bound and slow on purpose, so hashing and checking run
in a worker thread to keep the event loop free for other requests.
"""

import asyncio
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError

from fittrack.auth.errors import DuplicateIdentity, InvalidCredentials
from fittrack.auth.jwt import TokenCodec
from fittrack.auth.password import PasswordHasher
from fittrack.auth.store import CredentialStore
from fittrack.db.models import User

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    """What a successful register/login hands back to the client."""

    token: str
    user_id: int
    username: str
    email: str


class AuthService:
    """Business logic for account creation and credential checks."""

    def __init__(
        self,
        store: CredentialStore,
        codec: TokenCodec,
        hasher: PasswordHasher,
    ):
        self.store = store
        self.codec = codec
        self.hasher = hasher

    # ─── Register ───────────────────────────────────────

    async def register(self, username: str, email: str, raw_password: str) -> AuthResult:
        """Create an account and issue its first token.

        Email is checked before username, so a request colliding on
        both reports the email.
        """
        if await self.store.exists_by_email(email):
            logger.info("auth.register_rejected", reason="email_taken")
            raise DuplicateIdentity("email")
        if await self.store.exists_by_username(username):
            logger.info("auth.register_rejected", reason="username_taken")
            raise DuplicateIdentity("username")

        password_hash = await asyncio.to_thread(self.hasher.hash, raw_password)
        user = User(username=username, email=email, password_hash=password_hash)
        try:
            user = await self.store.save(user)
        except IntegrityError:
            # Lost a race with a concurrent registration
            logger.info("auth.register_rejected", reason="unique_violation")
            raise DuplicateIdentity("username or email")

        logger.info("auth.registered", user_id=user.id, username=user.username)
        return self._result_for(user)

    # ─── Login ──────────────────────────────────────────

    async def login(self, email_or_username: str, raw_password: str) -> AuthResult:
        """Check credentials and issue a fresh token.

        Unknown identity and wrong password raise the same error, and
        both pay for one bcrypt comparison.
        """
        user = await self.store.find_by_email_or_username(email_or_username)

        if user is None:
            await asyncio.to_thread(self.hasher.burn, raw_password)
            logger.info("auth.login_failed", reason="unknown_identity")
            raise InvalidCredentials()

        ok = await asyncio.to_thread(self.hasher.verify, raw_password, user.password_hash)
        if not ok:
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentials()

        logger.info("auth.logged_in", user_id=user.id)
        return self._result_for(user)

    def _result_for(self, user: User) -> AuthResult:
        token = self.codec.issue(user.id, user.username, user.email)
        return AuthResult(
            token=token,
            user_id=user.id,
            username=user.username,
            email=user.email,
        )
