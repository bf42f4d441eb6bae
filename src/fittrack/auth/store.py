"""Credential store — where user identities and password hashes live.

Learn: The auth service only depends on the CredentialStore protocol.
SqlAlchemyCredentialStore is the production implementation; tests can
hand the service anything with the same four methods.
"""

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.db.models import User


class CredentialStore(Protocol):
    async def exists_by_email(self, email: str) -> bool: ...

    async def exists_by_username(self, username: str) -> bool: ...

    async def find_by_email_or_username(self, value: str) -> Optional[User]: ...

    async def save(self, user: User) -> User: ...


class SqlAlchemyCredentialStore:
    """CredentialStore backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists_by_email(self, email: str) -> bool:
        q = select(User.id).where(User.email == email).limit(1)
        result = await self.db.execute(q)
        return result.first() is not None

    async def exists_by_username(self, username: str) -> bool:
        q = select(User.id).where(User.username == username).limit(1)
        result = await self.db.execute(q)
        return result.first() is not None

    async def find_by_email_or_username(self, value: str) -> Optional[User]:
        """Exact email match first, then exact username match."""
        result = await self.db.execute(select(User).where(User.email == value))
        user = result.scalars().first()
        if user is not None:
            return user

        result = await self.db.execute(select(User).where(User.username == value))
        return result.scalars().first()

    async def save(self, user: User) -> User:
        """Insert the user and commit.

        IntegrityError from the unique constraints is re-raised after
        the session is rolled back; the caller decides what it means.
        """
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user
