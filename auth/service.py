"""
Session issuer — signup, login and profile flows for students.

Validates request shape, delegates persistence and hashing to
``CredentialStore`` and mints bearer tokens with ``TokenIssuer``.
"""

from __future__ import annotations

import logging

from auth.errors import (
    ForbiddenRole,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from auth.jwt import TokenIssuer
from auth.password import MAX_PASSWORD_BYTES
from auth.schemas import (
    AuthResult,
    LoginRequest,
    ProfileUpdate,
    PublicProfile,
    SignupRequest,
)
from auth.store import CredentialStore
from database.models import Role, UserAccount

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def to_public_profile(account: UserAccount) -> PublicProfile:
    """Project an account onto the fields its owner may see (never the verifier)."""
    return PublicProfile(
        id=account.user_id,
        full_name=account.full_name,
        email=account.email,
        institution_name=account.institution_name,
        student_id=account.student_id,
        department=account.department,
        course=account.course,
        role=account.role,
        is_verified=account.is_verified,
        created_at=account.created_at,
    )


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class SessionIssuer:
    def __init__(self, store: CredentialStore, tokens: TokenIssuer):
        self._store = store
        self._tokens = tokens

    def _issue(self, account: UserAccount) -> AuthResult:
        token = self._tokens.create_token(str(account.user_id))
        return AuthResult(token=token, user=to_public_profile(account))

    async def signup(self, req: SignupRequest) -> AuthResult:
        """Create a student account and sign it in."""
        required = (
            req.full_name,
            req.email,
            req.institution_name,
            req.student_id,
            req.department,
            req.course,
            req.password,
            req.confirm_password,
        )
        if any(_blank(value) for value in required):
            raise ValidationError("All fields are required")
        if req.password != req.confirm_password:
            raise ValidationError("Passwords do not match")
        if len(req.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if len(req.password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes"
            )

        account = await self._store.create_account(
            {
                "full_name": req.full_name,
                "email": req.email,
                "institution_name": req.institution_name,
                "student_id": req.student_id,
                "department": req.department,
                "course": req.course,
            },
            req.password,
            role=Role.STUDENT,
        )
        return self._issue(account)

    async def login(self, req: LoginRequest) -> AuthResult:
        """
        Check email + password for a student account.

        Unknown email and wrong password raise the same ``InvalidCredentials``.
        """
        if _blank(req.email) or not req.password:
            raise ValidationError("Please provide email and password")

        account = await self._store.find_by_email(req.email, include_verifier=True)
        if account is None:
            logger.warning("Login failed: unknown email")
            raise InvalidCredentials()

        if account.role != Role.STUDENT.value:
            logger.warning("Login refused for %s: role %s", account.user_id, account.role)
            raise ForbiddenRole()

        # bcrypt 4.x truncates past 72 bytes; such a password never matches here.
        too_long = len(req.password.encode()) > MAX_PASSWORD_BYTES
        if too_long or not await self._store.verify_password(
            req.password, account.password_hash
        ):
            logger.warning("Login failed for %s: wrong password", account.user_id)
            raise InvalidCredentials()

        logger.info("Login: %s (%s)", account.email, account.user_id)
        return self._issue(account)

    async def get_current_account(self, user_id: str) -> PublicProfile:
        account = await self._store.find_by_id(user_id)
        if account is None:
            raise NotFound()
        return to_public_profile(account)

    async def update_profile(self, user_id: str, req: ProfileUpdate) -> PublicProfile:
        account = await self._store.update_profile(
            user_id, req.model_dump(exclude_none=True)
        )
        return to_public_profile(account)
