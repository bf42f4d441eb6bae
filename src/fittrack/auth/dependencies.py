"""FastAPI auth dependencies.

Learn: The authentication gate middleware has already looked at the
Authorization header by the time a handler runs. These dependencies
only read what it left on request.state and never decode tokens
themselves.

- get_current_identity_optional: "soft", None when unauthenticated
- get_current_identity: "hard", 401 when unauthenticated
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request


class AuthenticatedIdentity:
    """The caller proven by a valid bearer token.

    Learn: No roles are granted beyond "authenticated". The identity
    lives on request.state for one request and is never persisted.
    """

    def __init__(self, username: str, authorities: tuple[str, ...] = ()):
        self.username = username
        self.authorities = authorities

    def __repr__(self) -> str:
        return f"AuthenticatedIdentity(username={self.username!r})"


async def get_current_identity_optional(
    request: Request,
) -> Optional[AuthenticatedIdentity]:
    """Identity established by the gate, or None."""
    return getattr(request.state, "identity", None)


async def get_current_identity(
    identity: Optional[AuthenticatedIdentity] = Depends(get_current_identity_optional),
) -> AuthenticatedIdentity:
    """Require an authenticated caller, 401 otherwise."""
    if not identity:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
