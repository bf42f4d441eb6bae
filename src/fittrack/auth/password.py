"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=12) takes ~100ms per hash on modern hardware,
which makes offline brute force expensive.
"""

import bcrypt


class PasswordHasher:
    """bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Compared against when the user doesn't exist, so that path
        # costs the same as a real password check.
        self._dummy_hash = self.hash("fittrack-timing-equalizer")

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt.

        Passwords are truncated to 72 bytes (bcrypt's limit).
        """
        pw_bytes = password.encode("utf-8")[:72]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its bcrypt hash."""
        try:
            pw_bytes = password.encode("utf-8")[:72]
            hash_bytes = password_hash.encode("utf-8")
            return bcrypt.checkpw(pw_bytes, hash_bytes)
        except (ValueError, TypeError):
            return False

    def burn(self, password: str) -> None:
        """Spend one bcrypt comparison without a real hash to check."""
        self.verify(password, self._dummy_hash)
