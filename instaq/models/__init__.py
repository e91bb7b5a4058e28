"""Beanie document models and Pydantic schemas."""
from instaq.models.user import User, UserRole, SignupRequest, UserCreate, UserInDB
from instaq.models.attendance import (
    AttendanceRecord,
    AttendanceStatus,
    FamilyMember,
    QRCodeData,
    GeoPoint,
    DeviceInfo,
    AttendanceOut,
    AttendancePage,
    AttendanceStats,
    Pagination,
    ScanSummary,
    ScannerOut,
)

__all__ = [
    "User",
    "UserRole",
    "SignupRequest",
    "UserCreate",
    "UserInDB",
    "AttendanceRecord",
    "AttendanceStatus",
    "FamilyMember",
    "QRCodeData",
    "GeoPoint",
    "DeviceInfo",
    "AttendanceOut",
    "AttendancePage",
    "AttendanceStats",
    "Pagination",
    "ScanSummary",
    "ScannerOut",
]
