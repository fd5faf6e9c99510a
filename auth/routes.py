"""
Auth API routes — student signup, login, profile.

Route prefix: /api/auth
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from auth.dependencies import Identity, get_session_issuer, require_roles
from auth.schemas import AuthResult, LoginRequest, ProfileUpdate, SignupRequest
from auth.service import SessionIssuer
from database.models import Role

router = APIRouter(tags=["auth"])

student_only = require_roles(Role.STUDENT.value)


def _auth_body(result: AuthResult) -> Dict[str, Any]:
    return {
        "success": True,
        "token": result.token,
        "user": result.user.model_dump(mode="json", by_alias=True),
    }


@router.post("/student/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Dict[str, Any]:
    """Create a student account and return a session token."""
    return _auth_body(await issuer.signup(req))


@router.post("/student/login")
async def login(
    req: LoginRequest,
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Dict[str, Any]:
    """Login with email + password."""
    return _auth_body(await issuer.login(req))


@router.get("/student/me")
async def get_me(
    identity: Identity = Depends(student_only),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Dict[str, Any]:
    profile = await issuer.get_current_account(identity.user_id)
    return {"success": True, "user": profile.model_dump(mode="json", by_alias=True)}


@router.put("/student/profile")
async def update_profile(
    req: ProfileUpdate,
    identity: Identity = Depends(student_only),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Dict[str, Any]:
    """Update fullName / institutionName / department / course."""
    profile = await issuer.update_profile(identity.user_id, req)
    return {"success": True, "user": profile.model_dump(mode="json", by_alias=True)}
