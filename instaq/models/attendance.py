"""Attendance scans: one document per family QR code scan."""
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from beanie import Document
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING, IndexModel


class AttendanceStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class FamilyMember(BaseModel):
    name: str
    age: int
    is_child: bool = False
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None


class QRCodeData(BaseModel):
    type: Literal["attendance"] = "attendance"
    date: str
    time: str
    family_members: list[FamilyMember] = Field(default_factory=list)


class GeoPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(default_factory=lambda: [0.0, 0.0])


class DeviceInfo(BaseModel):
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class AttendanceRecord(Document):
    """A single scan. qr_code_data, scanned_by and scanned_at are write-once."""

    qr_code_data: QRCodeData
    scanned_by: str  # user_id
    scanned_at: datetime = Field(default_factory=datetime.utcnow)
    location: GeoPoint = Field(default_factory=GeoPoint)
    device_info: DeviceInfo = Field(default_factory=DeviceInfo)
    status: AttendanceStatus = AttendanceStatus.CONFIRMED
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def total_members(self) -> int:
        return len(self.qr_code_data.family_members)

    @property
    def adults_count(self) -> int:
        return sum(1 for m in self.qr_code_data.family_members if not m.is_child)

    @property
    def children_count(self) -> int:
        return sum(1 for m in self.qr_code_data.family_members if m.is_child)

    class Settings:
        name = "attendance_records"
        use_state_management = True
        indexes = [
            IndexModel([("qr_code_data.date", ASCENDING), ("scanned_at", DESCENDING)]),
            IndexModel([("scanned_by", ASCENDING), ("scanned_at", DESCENDING)]),
            IndexModel([("status", ASCENDING)]),
        ]


# API schemas. The mobile client speaks camelCase.


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FamilyMemberOut(CamelModel):
    name: str
    age: int
    is_child: bool
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None


class QRCodeDataOut(CamelModel):
    type: str
    date: str
    time: str
    family_members: list[FamilyMemberOut]


class DeviceInfoOut(CamelModel):
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class ScannerOut(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class AttendanceOut(CamelModel):
    id: str
    qr_code_data: QRCodeDataOut
    scanned_by: ScannerOut
    scanned_at: datetime
    location: GeoPoint
    device_info: DeviceInfoOut
    status: AttendanceStatus
    notes: Optional[str] = None
    total_members: int
    adults_count: int
    children_count: int
    created_at: datetime
    updated_at: datetime


class ScanSummary(CamelModel):
    total_members: int
    adults_count: int
    children_count: int
    scanned_at: datetime


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_records: int
    has_next_page: bool
    has_prev_page: bool


class AttendancePage(CamelModel):
    attendances: list[AttendanceOut]
    pagination: Pagination


class AttendanceStats(CamelModel):
    total_scans: int = 0
    total_members: int = 0
    total_adults: int = 0
    total_children: int = 0

