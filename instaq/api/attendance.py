"""Attendance scans from the mobile QR scanner."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Query

from instaq.api.deps import CurrentUser, RequestDevice
from instaq.config import settings
from instaq.models.attendance import AttendancePage
from instaq.services import attendance as store
from instaq.services.stats import compute_stats

router = APIRouter()


@router.post("/scan", status_code=201)
async def log_scan(user: CurrentUser, device: RequestDevice, payload: Any = Body(None)):
    """Log attendance from a QR code scan (any signed-in staff member)."""
    record = await store.create_scan(payload, user, device)
    [attendance] = await store.serialize_records([record])
    return {
        "success": True,
        "message": "Attendance logged successfully",
        "data": {
            "attendance": attendance.model_dump(by_alias=True),
            "summary": store.summarize_record(record).model_dump(by_alias=True),
        },
    }


@router.get("")
async def list_attendance(
    user: CurrentUser,
    date: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=settings.max_page_size),
):
    records, pagination = await store.list_records(user, date=date, status=status, page=page, page_size=limit)
    data = AttendancePage(attendances=await store.serialize_records(records), pagination=pagination)
    return {"success": True, "data": data.model_dump(by_alias=True)}


@router.get("/stats")
async def attendance_stats(user: CurrentUser, date: Optional[str] = None):
    stats = await compute_stats(user, date)
    return {"success": True, "data": stats.model_dump(by_alias=True)}


@router.get("/{record_id}")
async def get_attendance(record_id: str, user: CurrentUser):
    record = await store.get_record(record_id, user)
    [attendance] = await store.serialize_records([record])
    return {"success": True, "data": attendance.model_dump(by_alias=True)}


@router.put("/{record_id}/status")
async def update_attendance_status(record_id: str, user: CurrentUser, payload: Any = Body(None)):
    """Confirm, reject or reset a scan to pending (admin only)."""
    body = payload if isinstance(payload, dict) else {}
    record = await store.update_status(record_id, body.get("status"), user, notes=body.get("notes"))
    [attendance] = await store.serialize_records([record])
    return {
        "success": True,
        "message": "Attendance status updated successfully",
        "data": attendance.model_dump(by_alias=True),
    }


@router.delete("/{record_id}")
async def delete_attendance(record_id: str, user: CurrentUser):
    """Permanently delete a scan (admin only)."""
    deleted_id = await store.delete_record(record_id, user)
    return {
        "success": True,
        "message": "Attendance record deleted successfully",
        "data": {"deletedId": deleted_id},
    }
