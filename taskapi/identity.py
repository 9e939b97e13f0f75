"""Identity store: seeded users, login and bearer credentials.

Credentials are HS256 JWTs signed with the configured secret. Issuing and
verifying them keeps no server-side state.
"""

import logging
import threading
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from taskapi.config import Settings
from taskapi.errors import InvalidCredentialsError, InvalidTokenError, NotFoundError, ValidationError
from taskapi.models import LoginRequest, TokenResponse, User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"

INVALID_LOGIN = "invalid email or password"
USER_NOT_FOUND = "user not found"

SEED_USERS: tuple[tuple[str, str, str], ...] = (
    ("3484ec33-20f9-4993-a25f-f49f6f5dbe54", "john.doe@example.com", "password123"),
    ("550e8400-e29b-41d4-a716-446655440002", "jane.smith@example.com", "password123"),
    ("550e8400-e29b-41d4-a716-446655440003", "mike.wilson@example.com", "password123"),
)


def default_users() -> list[User]:
    return [User(id=UUID(uid), email=email, password=pw) for uid, email, pw in SEED_USERS]


def validate_login(request: LoginRequest) -> None:
    """Reject blank or malformed login fields before any lookup."""
    if not request.email.strip():
        raise ValidationError("email is required")
    if "@" not in request.email or "." not in request.email:
        raise ValidationError("invalid email format")
    if not request.password.strip():
        raise ValidationError("password is required")
    if len(request.password) < 8:
        raise ValidationError("password must be at least 8 characters long")


class IdentityStore:
    """Fixed set of users keyed by email, plus credential signing."""

    def __init__(self, settings: Settings, users: Iterable[User] | None = None) -> None:
        self._settings = settings
        self._lock = threading.Lock()
        self._by_email: dict[str, User] = {}
        self._by_id: dict[UUID, User] = {}
        for user in default_users() if users is None else users:
            self._by_email[user.email] = user
            self._by_id[user.id] = user

    def users(self) -> list[User]:
        with self._lock:
            return list(self._by_email.values())

    def lookup_by_email(self, email: str) -> User:
        with self._lock:
            user = self._by_email.get(email)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    def get_user(self, user_id: UUID) -> User:
        with self._lock:
            user = self._by_id.get(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Check an email/password pair.

        Unknown email and wrong password fail with the same message so the
        caller cannot tell which part was wrong.
        """
        with self._lock:
            user = self._by_email.get(email)
        # Plain comparison: seeded demo accounts carry no password hashes.
        if user is None or user.password != password:
            logger.warning("login failed")
            raise InvalidCredentialsError(INVALID_LOGIN)
        return user

    def _encode(self, user: User, token_type: str, ttl_seconds: int) -> str:
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "type": token_type,
            "iss": self._settings.jwt_issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
        }
        return jwt.encode(claims, self._settings.jwt_secret_key, algorithm=ALGORITHM)

    def issue_credential(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=self._encode(user, ACCESS, self._settings.access_token_ttl),
            refresh_token=self._encode(user, REFRESH, self._settings.refresh_token_ttl),
            expires_in=self._settings.access_token_ttl,
        )

    def verify_credential(self, token: str, *, token_type: str = ACCESS) -> User:
        """Resolve a bearer token to its user.

        Raises InvalidTokenError for malformed, badly signed, expired or
        wrong-type tokens and for subjects that are not known users.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[ALGORITHM],
                issuer=self._settings.jwt_issuer,
            )
        except JWTError as exc:
            raise InvalidTokenError() from exc
        if claims.get("type") != token_type:
            raise InvalidTokenError()
        try:
            user_id = UUID(str(claims.get("sub")))
            return self.get_user(user_id)
        except (ValueError, NotFoundError) as exc:
            raise InvalidTokenError() from exc

    def login(self, request: LoginRequest) -> TokenResponse:
        """Validate, authenticate and issue a fresh token pair."""
        validate_login(request)
        user = self.authenticate(request.email, request.password)
        logger.info("user %s logged in", user.id)
        return self.issue_credential(user)


__all__ = ["IdentityStore", "SEED_USERS", "default_users", "validate_login"]
