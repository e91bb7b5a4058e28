"""Seed the default admin, and optionally a staff user and a sample scan."""
import logging
from datetime import datetime

from instaq.api.deps import get_password_hash
from instaq.config import settings
from instaq.models.attendance import AttendanceRecord, FamilyMember, QRCodeData
from instaq.models.user import User, UserRole

logger = logging.getLogger(__name__)

STAFF_EMAIL = "staff@instaq.com"
STAFF_PASSWORD = "staff123"
STAFF_FULL_NAME = "Staff User"


async def _ensure_user(email: str, password: str, full_name: str, role: UserRole) -> User:
    existing = await User.find_one(User.email == email)
    if existing:
        return existing
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        full_name=full_name,
    )
    await user.insert()
    logger.info("Created %s user %s", role.value, email)
    return user


async def seed_admin() -> User:
    return await _ensure_user(settings.admin_email, settings.admin_password, settings.admin_full_name, UserRole.ADMIN)


async def seed_demo_data(admin: User) -> None:
    """Staff account plus one three-member family scan, only on an empty collection."""
    await _ensure_user(STAFF_EMAIL, STAFF_PASSWORD, STAFF_FULL_NAME, UserRole.STAFF)
    if await AttendanceRecord.count():
        return
    now = datetime.utcnow()
    await AttendanceRecord(
        qr_code_data=QRCodeData(
            date=now.date().isoformat(),
            time=now.strftime("%H:%M:%S"),
            family_members=[
                FamilyMember(
                    name="John Doe",
                    age=35,
                    phone="+1234567890",
                    address="123 Main St",
                    emergency_contact="Jane Doe",
                ),
                FamilyMember(
                    name="Jane Doe",
                    age=32,
                    phone="+1234567891",
                    address="123 Main St",
                    emergency_contact="John Doe",
                ),
                FamilyMember(name="Baby Doe", age=5, is_child=True),
            ],
        ),
        scanned_by=str(admin.id),
        notes="Sample attendance record for testing",
    ).insert()
    logger.info("Created sample attendance record")


async def seed_all() -> None:
    admin = await seed_admin()
    if settings.seed_demo_data:
        await seed_demo_data(admin)
