"""
Pydantic schemas for the student auth API.

JSON bodies use camelCase keys (``fullName``, ``studentId``...); Python code
uses the snake_case attribute names.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from email_validator import validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Request bodies ─────────────────────────────────────────────────────
# Every field is optional here so a missing field is reported by the
# service as a 400, not by FastAPI as a 422.


class SignupRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    institution_name: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None
    course: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    # Accepted and ignored: signup always creates a student.
    role: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    """The only fields a student may change after signup."""

    full_name: Optional[str] = None
    institution_name: Optional[str] = None
    department: Optional[str] = None
    course: Optional[str] = None


# ── Store-side validation ──────────────────────────────────────────────


class AccountFields(BaseModel):
    """Field constraints enforced on every write to the account store."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1)
    institution_name: str = Field(..., min_length=1, max_length=200)
    student_id: str = Field(..., min_length=1, max_length=50)
    department: str = Field(..., min_length=1, max_length=100)
    course: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def _plain_address(cls, value: str) -> str:
        # Bare addresses only: "Name <addr>" display forms are rejected.
        validate_email(value, check_deliverability=False)
        return value


class ProfileFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    institution_name: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    course: Optional[str] = Field(None, min_length=1, max_length=100)


FIELD_LABELS = {
    "full_name": "Full name",
    "email": "Email",
    "institution_name": "Institution name",
    "student_id": "Student ID",
    "department": "Department",
    "course": "Course",
}


# ── Responses ──────────────────────────────────────────────────────────


class PublicProfile(CamelModel):
    """Account fields safe to return to the account owner."""

    id: uuid.UUID
    full_name: str
    email: str
    institution_name: str
    student_id: str
    department: str
    course: str
    role: str
    is_verified: bool
    created_at: datetime


class AuthResult(BaseModel):
    token: str
    user: PublicProfile
