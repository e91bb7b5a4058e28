"""JWT-based stateless authentication."""
import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from instaq.api.deps import (
    CurrentUser,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from instaq.exceptions import AuthenticationError
from instaq.models.user import SignupRequest, User, UserInDB, UserRole
from instaq.services.attendance import safe_object_id

logger = logging.getLogger(__name__)

router = APIRouter()


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


def _tokens_for(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(str(user.id), user.role.value),
        refresh_token=create_refresh_token(str(user.id)),
    )


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest):
    user = await User.find_one(User.email == req.email.strip().lower())
    if not user or not user.is_active or not verify_password(req.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")
    return _tokens_for(user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: SignupRequest):
    """Self-service signup. New accounts are always staff."""
    email = data.email.lower()
    existing = await User.find_one(User.email == email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    user = User(
        email=email,
        hashed_password=get_password_hash(data.password),
        role=UserRole.STAFF,
        full_name=data.full_name.strip(),
        phone=data.phone,
        address=data.address,
    )
    await user.insert()
    logger.info("Registered staff user %s", user.id)
    return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(req: RefreshRequest):
    user_id = decode_token(req.refresh_token, "refresh")
    oid = safe_object_id(user_id)
    user = await User.get(oid) if oid else None
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return _tokens_for(user)


@router.get("/me", response_model=UserInDB)
async def me(user: CurrentUser):
    return UserInDB.from_user(user)
