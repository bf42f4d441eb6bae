"""Authentication error taxonomy.

Learn: Routes translate these into HTTP errors with generic messages.
The attributes carry detail for server-side logs only. Nothing here
is meant to be echoed back to a client verbatim.
"""


class AuthError(Exception):
    """Base class for authentication failures."""


class ConfigurationError(AuthError):
    """Missing or weak auth configuration. Fatal at startup."""


class InvalidToken(AuthError):
    """Token is malformed, unsigned, or carries a bad signature."""


class DuplicateIdentity(AuthError):
    """Registration collided with an existing username or email."""

    def __init__(self, field: str):
        super().__init__(f"{field} already registered")
        self.field = field


class InvalidCredentials(AuthError):
    """Login failed.

    Deliberately the same for "no such user" and "wrong password",
    so callers can't tell which one happened.
    """

    def __init__(self):
        super().__init__("Invalid credentials")
