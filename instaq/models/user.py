"""Principals: admins (elevated) and staff scanners."""
from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class User(Document):
    """User document; the role decides what the access gate allows."""

    email: Indexed(EmailStr, unique=True)
    hashed_password: str
    role: UserRole = UserRole.STAFF
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
        use_state_management = True


class SignupRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, alias="name")
    phone: Optional[str] = None
    address: Optional[str] = None


class UserCreate(SignupRequest):
    role: UserRole = UserRole.STAFF


class UserInDB(BaseModel):
    id: str
    email: str
    role: UserRole
    full_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool

    @classmethod
    def from_user(cls, user: User) -> "UserInDB":
        return cls(
            id=str(user.id),
            email=user.email,
            role=user.role,
            full_name=user.full_name,
            phone=user.phone,
            address=user.address,
            is_active=user.is_active,
        )
