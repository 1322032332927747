"""Authentication service for RideLink: password + OTP login and sessions."""

import hmac
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

import jwt

from ridelink import config
from ridelink.clock import Clock
from ridelink.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    InvalidOtpError,
    InvalidResetTokenError,
    NotFoundError,
    OtpNotFoundError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from ridelink.models import Driver, OtpToken, PasswordResetToken, Role, Session, User
from ridelink.services.credentials import BcryptHasher
from ridelink.services.driver_service import DriverAvailabilityRegistry
from ridelink.services.notifier import Notifier
from ridelink.services.otp_service import OtpIssuer
from ridelink.services.session_store import SessionStore
from ridelink.storage.base import StaleRecordError
from ridelink.storage.repositories import (
    OtpTokenRepository,
    PasswordResetTokenRepository,
    Repository,
    UserRepository,
)

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "

# Minimum time between sweeps of expired sessions
SESSION_PURGE_INTERVAL = timedelta(minutes=15)


@dataclass
class Principal:
    """The user behind a session, with their driver profile if they drive."""
    user: User
    driver: Optional[Driver] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"user": self.user.to_public_dict()}
        if self.driver is not None:
            data["driver"] = self.driver.to_public_dict()
        return data


class AuthSessionManager:
    """
    Registration, two-factor login and bearer sessions.

    A login attempt moves from password check to a pending OTP; only a
    matching, unexpired OTP produces a session token.
    """

    def __init__(self, users: UserRepository, registry: DriverAvailabilityRegistry,
                 otp_tokens: OtpTokenRepository, reset_tokens: PasswordResetTokenRepository,
                 sessions: SessionStore, hasher: BcryptHasher, otp_issuer: OtpIssuer,
                 notifier: Notifier, clock: Optional[Clock] = None,
                 jwt_secret: Optional[str] = None,
                 session_ttl: Optional[timedelta] = None,
                 otp_ttl: Optional[timedelta] = None,
                 reset_ttl: Optional[timedelta] = None,
                 reset_url: Optional[str] = None,
                 max_retries: int = 5):
        self.users = users
        self.registry = registry
        self.otp_tokens = otp_tokens
        self.reset_tokens = reset_tokens
        self.sessions = sessions
        self.hasher = hasher
        self.otp_issuer = otp_issuer
        self.notifier = notifier
        self.clock = clock or Clock()
        self.jwt_secret = jwt_secret or config.JWT_SECRET
        self.session_ttl = session_ttl or timedelta(hours=config.SESSION_EXPIRATION_HOURS)
        self.otp_ttl = otp_ttl or timedelta(minutes=config.OTP_EXPIRATION_MINUTES)
        self.reset_ttl = reset_ttl or timedelta(hours=config.RESET_TOKEN_EXPIRATION_HOURS)
        self.reset_url = reset_url or config.RESET_PASSWORD_URL
        self.max_retries = max_retries
        self._registration_lock = threading.Lock()
        self._dummy_hash: Optional[str] = None
        self._next_purge: Optional[datetime] = None

    def register(self, email: str, password: str, name: str, phone: str,
                 role: Any = Role.RIDER) -> Dict[str, Any]:
        """
        Register a new user.

        Drivers also get a driver profile, unavailable until they go online.

        Args:
            email: User's email
            password: User's password
            name: Display name
            phone: Phone number
            role: RIDER, DRIVER or ADMIN

        Returns:
            Dict: Public user data, plus the driver profile for drivers

        Raises:
            ValidationError: If email, password or role is invalid, or the password is too long
            ConflictError: If the email or phone is already registered
        """
        email = (email or "").strip()
        phone = (phone or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required")
        try:
            role = Role.parse(role)
        except ValueError as e:
            raise ValidationError(str(e))

        hashed = self.hasher.hash(password)

        with self._registration_lock:
            if self.users.find_by_email(email) is not None:
                raise ConflictError("User already exists")
            if phone and self.users.find_by_phone(phone) is not None:
                raise ConflictError("Phone number is already registered.")

            user = self.users.save(User(
                email=email,
                password=hashed,
                name=name,
                phone=phone,
                role=role,
                created_at=self.clock.now(),
            ))
            logger.info(f"Registered {role.value.lower()} {email}")

            principal = Principal(user=user)
            if role == Role.DRIVER:
                principal.driver = self.registry.drivers.save(
                    Driver(name=name, phone=phone, available=False, user_id=user.id))

        return principal.to_dict()

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check a password and send a one-time passcode.

        Returns:
            Dict: {"requires_two_factor": True}; no session yet

        Raises:
            InvalidCredentialsError: Same error for unknown email and wrong password
        """
        user = self.users.find_by_email(email)
        if user is None:
            # Spend the same bcrypt time as a real check
            self.hasher.verify(password or "", self._placeholder_hash())
            raise InvalidCredentialsError()

        if not self.hasher.verify(password or "", user.password):
            raise InvalidCredentialsError()

        code = self.otp_issuer.generate_otp()
        expires_at = self.clock.now() + self.otp_ttl
        self._upsert(self.otp_tokens, user.id, lambda version: OtpToken(
            id=user.id, user_email=user.email, code=code, expires_at=expires_at, version=version))
        self.otp_issuer.send_otp(user.email, code)
        logger.info(f"OTP issued for {user.email}")

        return {"requires_two_factor": True}

    def verify_otp(self, email: str, code: str) -> Dict[str, Any]:
        """
        Trade a valid one-time passcode for a session token.

        Returns:
            Dict: token, public user data, and the driver profile for drivers

        Raises:
            OtpNotFoundError: If no passcode is pending for the email
            InvalidOtpError: If the code is wrong or expired
        """
        otp = self.otp_tokens.find_by_user_email(email)
        if otp is None:
            raise OtpNotFoundError()

        matches = hmac.compare_digest(otp.code.encode("utf-8"), str(code or "").encode("utf-8"))
        if not matches or otp.is_expired(self.clock.now()):
            raise InvalidOtpError()

        # Single use: whoever deletes the passcode owns the login
        if not self.otp_tokens.delete_by_id(otp.id):
            raise OtpNotFoundError()

        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError(f"User with email {email} not found")

        token = self._issue_session(user.email)
        result = {"token": token}
        result.update(self._principal(user).to_dict())
        return result

    def current_user(self, bearer_token: Optional[str]) -> Principal:
        """
        Resolve the user behind a bearer token.

        Raises:
            UnauthorizedError: If the token is missing, invalid, unknown or expired
        """
        session = self._session_for(bearer_token)
        user = self.users.find_by_email(session.email)
        if user is None:
            raise UnauthorizedError("Session user no longer exists")
        return self._principal(user)

    def logout(self, bearer_token: Optional[str]) -> None:
        """End a session. Raises UnauthorizedError if it is not active."""
        session = self._session_for(bearer_token)
        self.sessions.delete(session.id)
        logger.info(f"Session closed for {session.email}")

    def driver_profile(self, email: str) -> Driver:
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError(f"User with email {email} not found")
        if not user.is_driver:
            raise ValidationError("User is not a driver")
        driver = self.registry.driver_for_user(user)
        if driver is None:
            raise NotFoundError(f"No driver profile for {email}")
        return driver

    def forgot_password(self, email: str) -> None:
        """
        Issue a one-hour password reset token and mail the reset link.

        Raises:
            NotFoundError: If no user has this email
        """
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        token = secrets.token_urlsafe(32)
        expires_at = self.clock.now() + self.reset_ttl
        self._upsert(self.reset_tokens, user.id, lambda version: PasswordResetToken(
            id=user.id, token=token, user_id=user.id, expires_at=expires_at, version=version))

        try:
            self.notifier.send(user.email, "Password Reset", f"{self.reset_url}?token={token}")
        except Exception as e:
            logger.warning(f"Could not dispatch reset link to {user.email}: {str(e)}")

    def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password with a reset token. The token works once.

        Raises:
            ValidationError: If the new password is empty or too long
            NotFoundError: If the token is unknown or already used
            InvalidResetTokenError: If the token has expired
        """
        if not new_password:
            raise ValidationError("New password is required")

        record = self.reset_tokens.find_by_token(token) if token else None
        if record is None:
            raise NotFoundError("Invalid password reset token")
        if record.is_expired(self.clock.now()):
            raise InvalidResetTokenError()

        hashed = self.hasher.hash(new_password)
        if not self.reset_tokens.delete_by_id(record.id):
            raise NotFoundError("Invalid password reset token")

        for _ in range(self.max_retries):
            user = self.users.find_by_id(record.user_id)
            if user is None:
                raise NotFoundError("User not found")
            user.password = hashed
            try:
                self.users.save(user)
            except StaleRecordError:
                continue
            logger.info(f"Password reset for {user.email}")
            return

        raise ConflictError("Could not update password, try again")

    def _principal(self, user: User) -> Principal:
        driver = self.registry.driver_for_user(user) if user.is_driver else None
        return Principal(user=user, driver=driver)

    def _issue_session(self, email: str) -> str:
        now = self.clock.now()
        self._purge_sessions(now)
        session = Session(id=uuid4().hex, email=email, issued_at=now, expires_at=now + self.session_ttl)
        self.sessions.put(session)
        logger.info(f"Session opened for {email}")
        return jwt.encode({"sub": email, "jti": session.id}, self.jwt_secret, algorithm=config.JWT_ALGORITHM)

    def _purge_sessions(self, now: datetime) -> None:
        if self._next_purge is not None and now < self._next_purge:
            return
        self._next_purge = now + SESSION_PURGE_INTERVAL
        try:
            removed = self.sessions.purge_expired(now)
        except StorageError as e:
            logger.warning(f"Could not purge expired sessions: {str(e)}")
            return
        if removed:
            logger.info(f"Purged {removed} expired session(s)")

    def _session_for(self, bearer_token: Optional[str]) -> Session:
        token = (bearer_token or "").strip()
        if token.lower().startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):].strip()
        if not token:
            raise UnauthorizedError("Missing session token")

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[config.JWT_ALGORITHM])
        except jwt.PyJWTError as e:
            raise UnauthorizedError(f"Invalid session token: {str(e)}")

        session = self.sessions.get(payload.get("jti", ""))
        if session is None or session.email != payload.get("sub"):
            raise UnauthorizedError("Unknown session")
        if session.is_expired(self.clock.now()):
            self.sessions.delete(session.id)
            raise UnauthorizedError("Session expired")
        return session

    def _placeholder_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash(secrets.token_hex(8))
        return self._dummy_hash

    def _upsert(self, repository: Repository, record_id: Any, build: Callable[[Optional[int]], Any]):
        """Create or overwrite the single record of a user in one write."""
        for _ in range(self.max_retries):
            existing = repository.find_by_id(record_id)
            try:
                return repository.save(build(existing.version if existing else None))
            except StaleRecordError:
                continue
        raise ConflictError("Too many concurrent updates, try again")
