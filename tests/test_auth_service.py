"""Auth service tests — registration and login without HTTP.

Learn: The service only needs something shaped like a CredentialStore,
so these tests hand it a dict-backed fake and skip the database.
"""

from typing import Optional

import pytest
from structlog.testing import capture_logs
from sqlalchemy.exc import IntegrityError

from fittrack.auth.errors import DuplicateIdentity, InvalidCredentials
from fittrack.db.models import User
from fittrack.services.auth_service import AuthService


class FakeCredentialStore:
    def __init__(self):
        self.users: list[User] = []
        self.fail_next_save = False

    async def exists_by_email(self, email: str) -> bool:
        return any(u.email == email for u in self.users)

    async def exists_by_username(self, username: str) -> bool:
        return any(u.username == username for u in self.users)

    async def find_by_email_or_username(self, value: str) -> Optional[User]:
        for u in self.users:
            if u.email == value:
                return u
        for u in self.users:
            if u.username == value:
                return u
        return None

    async def save(self, user: User) -> User:
        if self.fail_next_save:
            self.fail_next_save = False
            raise IntegrityError("INSERT INTO users", {}, Exception("unique violation"))
        user.id = len(self.users) + 1
        self.users.append(user)
        return user


@pytest.fixture()
def store():
    return FakeCredentialStore()


@pytest.fixture()
def service(store, codec, hasher):
    return AuthService(store=store, codec=codec, hasher=hasher)


# ═══════════════════════════════════════════════════════════
# Register
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_returns_token_and_identity(service, codec):
    result = await service.register("alice", "a@x.com", "secret1")

    assert result.user_id == 1
    assert result.username == "alice"
    assert result.email == "a@x.com"
    claims = codec.verify_signature_and_decode(result.token)
    assert claims["userId"] == 1
    assert claims["username"] == "alice"
    assert claims["email"] == "a@x.com"


@pytest.mark.asyncio
async def test_register_stores_only_a_hash(service, store, hasher):
    await service.register("alice", "a@x.com", "secret1")

    stored = store.users[0]
    assert stored.password_hash != "secret1"
    assert hasher.verify("secret1", stored.password_hash)


@pytest.mark.asyncio
async def test_register_duplicate_username(service):
    await service.register("alice", "a@x.com", "secret1")

    with pytest.raises(DuplicateIdentity) as exc:
        await service.register("alice", "b@x.com", "secret2")
    assert exc.value.field == "username"


@pytest.mark.asyncio
async def test_register_duplicate_email(service):
    await service.register("alice", "a@x.com", "secret1")

    with pytest.raises(DuplicateIdentity) as exc:
        await service.register("bobby", "a@x.com", "secret2")
    assert exc.value.field == "email"


@pytest.mark.asyncio
async def test_register_both_collide_reports_email_first(service):
    await service.register("alice", "a@x.com", "secret1")

    with pytest.raises(DuplicateIdentity) as exc:
        await service.register("alice", "a@x.com", "secret2")
    assert exc.value.field == "email"


@pytest.mark.asyncio
async def test_register_unique_violation_race_is_duplicate(service, store):
    store.fail_next_save = True
    with pytest.raises(DuplicateIdentity):
        await service.register("alice", "a@x.com", "secret1")


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_by_username(service):
    await service.register("alice", "a@x.com", "secret1")

    result = await service.login("alice", "secret1")
    assert result.username == "alice"
    assert result.user_id == 1


@pytest.mark.asyncio
async def test_login_by_email(service):
    await service.register("alice", "a@x.com", "secret1")

    result = await service.login("a@x.com", "secret1")
    assert result.username == "alice"


@pytest.mark.asyncio
async def test_login_issues_fresh_valid_token(service, codec):
    await service.register("alice", "a@x.com", "secret1")

    result = await service.login("alice", "secret1")
    assert codec.validate(result.token, "alice")


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_are_indistinguishable(service):
    await service.register("alice", "a@x.com", "secret1")

    with pytest.raises(InvalidCredentials) as wrong_pw:
        await service.login("alice", "wrongpass")
    with pytest.raises(InvalidCredentials) as unknown:
        await service.login("nobody", "anything")

    assert type(wrong_pw.value) is type(unknown.value)
    assert str(wrong_pw.value) == str(unknown.value) == "Invalid credentials"


@pytest.mark.asyncio
async def test_passwords_never_reach_the_logs(service):
    with capture_logs() as logs:
        await service.register("alice", "a@x.com", "secret1")
        await service.login("alice", "secret1")
        with pytest.raises(InvalidCredentials):
            await service.login("alice", "hunter2-wrong")

    dumped = repr(logs)
    assert "secret1" not in dumped
    assert "hunter2-wrong" not in dumped
    assert "$2" not in dumped
    events = [entry["event"] for entry in logs]
    assert "auth.registered" in events
    assert "auth.login_failed" in events
