"""
FastAPI dependencies for authentication.

``get_current_identity`` verifies the Bearer token and resolves the
account; ``require_roles`` layers a role check on top of it.  Routes
combine them with ``Depends`` like any other dependency.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import ForbiddenRole, InvalidToken
from auth.jwt import TokenIssuer
from auth.service import SessionIssuer
from auth.store import CredentialStore
from config.settings import Settings
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as resolved from a verified token."""

    user_id: str
    role: str


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_credential_store(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> CredentialStore:
    return CredentialStore(
        session,
        hash_rounds=settings.password_hash_rounds,
        hash_layers=settings.password_hash_layers,
    )


def get_session_issuer(
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> SessionIssuer:
    return SessionIssuer(store, tokens)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
    store: CredentialStore = Depends(get_credential_store),
) -> Identity:
    """
    Extract and verify the Bearer token, returning the authenticated
    account's id and role.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidToken()

    user_id = tokens.verify_token(credentials.credentials)
    account = await store.find_by_id(user_id)
    if account is None:
        raise InvalidToken("No user found with this id")
    return Identity(user_id=str(account.user_id), role=account.role)


def require_roles(*roles: str) -> Callable[..., Awaitable[Identity]]:
    """Build a dependency that admits only callers holding one of ``roles``."""
    allowed = frozenset(roles)

    async def _check(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            raise ForbiddenRole(
                f"User role {identity.role} is not authorized to access this route"
            )
        return identity

    return _check
