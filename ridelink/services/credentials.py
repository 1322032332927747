"""Password hashing for RideLink."""

import logging

import bcrypt

from ridelink.exceptions import ValidationError

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of a password
MAX_PASSWORD_BYTES = 72


class BcryptHasher:
    """Hashes and checks passwords with bcrypt."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password

        Raises:
            ValidationError: If the password is longer than bcrypt accepts
        """
        password_bytes = password.encode('utf-8')
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password_bytes, salt)
        return hashed.decode('utf-8')

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Previously hashed password

        Returns:
            bool: True if password matches, False otherwise
        """
        if not hashed_password:
            return False

        try:
            return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Password verification error: {str(e)}")
            return False
