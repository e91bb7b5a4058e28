"""Attendance store: create, read, list, status update and delete of scans."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Iterable, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from instaq.config import settings
from instaq.exceptions import FieldViolation, NotFoundError, ValidationError
from instaq.models.attendance import (
    AttendanceOut,
    AttendanceRecord,
    AttendanceStatus,
    DeviceInfo,
    Pagination,
    ScannerOut,
    ScanSummary,
)
from instaq.models.user import User
from instaq.rbac import authorize
from instaq.services.stats import date_filter
from instaq.services.validation import validate_scan

logger = logging.getLogger(__name__)


def safe_object_id(value: str | None) -> PydanticObjectId | None:
    if not value:
        return None
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


async def _load(record_id: str) -> AttendanceRecord:
    oid = safe_object_id(record_id)
    record = await AttendanceRecord.get(oid) if oid else None
    if not record:
        raise NotFoundError()
    return record


def summarize_record(record: AttendanceRecord) -> ScanSummary:
    return ScanSummary(
        total_members=record.total_members,
        adults_count=record.adults_count,
        children_count=record.children_count,
        scanned_at=record.scanned_at,
    )


async def create_scan(
    payload: Any,
    user: Optional[User],
    device_info: Optional[DeviceInfo] = None,
) -> AttendanceRecord:
    """Validate and persist one scan. Either the whole record is stored or nothing is."""
    authorize(user, "create")
    scan = validate_scan(payload)
    now = datetime.utcnow()
    record = AttendanceRecord(
        qr_code_data=scan.qr_code_data,
        scanned_by=str(user.id),
        scanned_at=now,
        location=scan.location,
        device_info=device_info or DeviceInfo(),
        status=AttendanceStatus.CONFIRMED,
        notes=scan.notes,
        created_at=now,
        updated_at=now,
    )
    await record.insert()
    logger.info(
        "Attendance %s logged by %s: %d member(s) for %s",
        record.id,
        user.id,
        record.total_members,
        record.qr_code_data.date,
    )
    return record


async def get_record(record_id: str, user: Optional[User]) -> AttendanceRecord:
    authorize(user, "get")
    return await _load(record_id)


async def list_records(
    user: Optional[User],
    date: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
) -> tuple[list[AttendanceRecord], Pagination]:
    """Most recent scans first, 1-based pages."""
    authorize(user, "list")
    if page_size is None:
        page_size = settings.default_page_size
    violations = []
    if page < 1:
        violations.append(FieldViolation("page", "Page must be at least 1"))
    if page_size < 1:
        violations.append(FieldViolation("limit", "Page size must be at least 1"))
    if violations:
        raise ValidationError(violations)

    query = date_filter(date)
    if status:
        query["status"] = status

    records = (
        await AttendanceRecord.find(query)
        .sort([("scanned_at", DESCENDING), ("_id", DESCENDING)])
        .skip((page - 1) * page_size)
        .limit(page_size)
        .to_list()
    )
    total = await AttendanceRecord.find(query).count()
    pagination = Pagination(
        current_page=page,
        total_pages=math.ceil(total / page_size),
        total_records=total,
        has_next_page=page * page_size < total,
        has_prev_page=page > 1,
    )
    return records, pagination


async def update_status(
    record_id: str,
    status: Any,
    user: Optional[User],
    notes: Any = None,
) -> AttendanceRecord:
    """Overwrite the status (and notes when given). Any status may follow any other."""
    authorize(user, "update_status")
    violations = []
    new_status = None
    try:
        new_status = AttendanceStatus(status)
    except ValueError:
        violations.append(FieldViolation("status", "Invalid status"))
    if notes is not None and not isinstance(notes, str):
        violations.append(FieldViolation("notes", "Notes must be a string"))
    if violations:
        raise ValidationError(violations)

    record = await _load(record_id)
    previous = record.status
    record.status = new_status
    if notes is not None:
        record.notes = notes.strip() or None
    record.updated_at = datetime.utcnow()
    await record.save()
    logger.info("Attendance %s status %s -> %s by %s", record.id, previous.value, new_status.value, user.id)
    return record


async def delete_record(record_id: str, user: Optional[User]) -> str:
    authorize(user, "delete")
    record = await _load(record_id)
    deleted_id = str(record.id)
    await record.delete()
    logger.info("Attendance %s deleted by %s", deleted_id, user.id)
    return deleted_id


async def build_scanner_map(records: Iterable[AttendanceRecord]) -> dict[str, User]:
    user_ids: list[PydanticObjectId] = []
    for record in records:
        oid = safe_object_id(record.scanned_by)
        if oid and oid not in user_ids:
            user_ids.append(oid)
    if not user_ids:
        return {}
    users = await User.find({"_id": {"$in": user_ids}}).to_list()
    return {str(u.id): u for u in users}


def serialize_record(record: AttendanceRecord, scanners: dict[str, User]) -> AttendanceOut:
    scanner = scanners.get(record.scanned_by)
    if scanner:
        scanned_by = ScannerOut(id=str(scanner.id), name=scanner.full_name, email=scanner.email, role=scanner.role.value)
    else:
        scanned_by = ScannerOut(id=record.scanned_by)
    qr = record.qr_code_data
    return AttendanceOut.model_validate(
        {
            "id": str(record.id),
            "qr_code_data": {
                "type": qr.type,
                "date": qr.date,
                "time": qr.time,
                "family_members": [m.model_dump() for m in qr.family_members],
            },
            "scanned_by": scanned_by,
            "scanned_at": record.scanned_at,
            "location": record.location,
            "device_info": record.device_info.model_dump(),
            "status": record.status,
            "notes": record.notes,
            "total_members": record.total_members,
            "adults_count": record.adults_count,
            "children_count": record.children_count,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }
    )


async def serialize_records(records: list[AttendanceRecord]) -> list[AttendanceOut]:
    scanners = await build_scanner_map(records)
    return [serialize_record(record, scanners) for record in records]
