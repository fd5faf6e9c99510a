"""
Credential store — persistence of ``UserAccount`` rows.

Owns field validation, the uniqueness rules for email / student ID, and
the one-way password transform on the write path.  bcrypt work runs in a
worker thread via ``asyncio.to_thread`` so it never blocks the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pydantic
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from auth.errors import DuplicateIdentity, NotFound, ValidationError
from auth.password import derive_verifier, verify_password
from auth.schemas import FIELD_LABELS, AccountFields, ProfileFields
from database.models import Role, UserAccount

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _first_error(exc: pydantic.ValidationError) -> ValidationError:
    """Turn the first pydantic error into a caller-facing message."""
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err.get("loc") else ""
    label = FIELD_LABELS.get(field, field)
    ctx = err.get("ctx") or {}
    if err["type"] == "string_too_long":
        return ValidationError(
            f"{label} cannot exceed {ctx.get('max_length')} characters"
        )
    if err["type"] in ("missing", "string_too_short", "string_type"):
        return ValidationError(f"{label} is required")
    if field == "email":
        return ValidationError("Please provide a valid email")
    return ValidationError(f"{label}: {err['msg']}")


class CredentialStore:
    """Account persistence bound to one ``AsyncSession``."""

    def __init__(self, session: AsyncSession, *, hash_rounds: int = 12, hash_layers: int = 10):
        self._session = session
        self._hash_rounds = hash_rounds
        self._hash_layers = hash_layers

    # ── Password transforms ─────────────────────────────────────────────

    async def derive_verifier(self, password: str) -> str:
        return await asyncio.to_thread(
            derive_verifier,
            password,
            rounds=self._hash_rounds,
            layers=self._hash_layers,
        )

    async def verify_password(self, password: str, verifier: str) -> bool:
        return await asyncio.to_thread(verify_password, password, verifier)

    # ── Writes ──────────────────────────────────────────────────────────

    async def create_account(
        self,
        fields: Dict[str, Any],
        password: str,
        role: Role = Role.STUDENT,
    ) -> UserAccount:
        """
        Validate, hash and insert a new account.

        Raises ``ValidationError`` for bad fields and ``DuplicateIdentity``
        when the email (case-insensitive) or student ID is already taken,
        including a duplicate inserted concurrently after the pre-check.
        """
        fields = dict(fields)
        if isinstance(fields.get("email"), str):
            fields["email"] = normalize_email(fields["email"])
        try:
            valid = AccountFields.model_validate(fields)
        except pydantic.ValidationError as exc:
            raise _first_error(exc) from None

        email = normalize_email(valid.email)
        existing = await self._session.execute(
            select(UserAccount.user_id).where(
                or_(
                    UserAccount.email == email,
                    UserAccount.student_id == valid.student_id,
                )
            )
        )
        if existing.first() is not None:
            raise DuplicateIdentity()

        now = datetime.now(timezone.utc)
        account = UserAccount(
            user_id=uuid.uuid4(),
            full_name=valid.full_name,
            email=email,
            institution_name=valid.institution_name,
            student_id=valid.student_id,
            department=valid.department,
            course=valid.course,
            password_hash=await self.derive_verifier(password),
            role=role.value,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )
        self._session.add(account)
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            logger.info("Duplicate account rejected by unique constraint: %s", email)
            raise DuplicateIdentity() from None

        logger.info("Created %s account %s (%s)", account.role, account.user_id, email)
        return account

    async def update_profile(
        self,
        user_id: str | uuid.UUID,
        changes: Dict[str, Any],
    ) -> UserAccount:
        """
        Apply a partial update of the caller-mutable profile fields.

        ``None`` values and keys outside the mutable set are ignored.
        """
        account = await self.find_by_id(user_id)
        if account is None:
            raise NotFound()

        try:
            valid = ProfileFields.model_validate(
                {k: v for k, v in changes.items() if k in ProfileFields.model_fields}
            )
        except pydantic.ValidationError as exc:
            raise _first_error(exc) from None

        updates = valid.model_dump(exclude_none=True)
        for name, value in updates.items():
            setattr(account, name, value)
        account.updated_at = datetime.now(timezone.utc)
        await self._session.commit()

        logger.info("Updated profile %s: %s", account.user_id, sorted(updates))
        return account

    # ── Reads ───────────────────────────────────────────────────────────

    async def find_by_email(
        self,
        email: str,
        *,
        include_verifier: bool = False,
    ) -> Optional[UserAccount]:
        """Case-insensitive lookup; the verifier is only loaded on request."""
        stmt = select(UserAccount).where(UserAccount.email == normalize_email(email))
        if include_verifier:
            stmt = stmt.options(undefer(UserAccount.password_hash))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[UserAccount]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        result = await self._session.execute(
            select(UserAccount).where(UserAccount.user_id == uid)
        )
        return result.scalar_one_or_none()
