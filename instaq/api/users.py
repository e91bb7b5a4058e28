"""User directory - admin management of scanners and admins."""
from fastapi import APIRouter, HTTPException

from instaq.api.deps import AdminOnly, get_password_hash
from instaq.models.user import User, UserCreate, UserInDB

router = APIRouter()


@router.get("/", response_model=list[UserInDB])
async def list_users(admin: AdminOnly):
    users = await User.find_all().sort("email").to_list()
    return [UserInDB.from_user(u) for u in users]


@router.post("/", status_code=201, response_model=UserInDB)
async def create_user(data: UserCreate, admin: AdminOnly):
    email = data.email.lower()
    existing = await User.find_one(User.email == email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    u = User(
        email=email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
        full_name=data.full_name.strip(),
        phone=data.phone,
        address=data.address,
    )
    await u.insert()
    return UserInDB.from_user(u)
