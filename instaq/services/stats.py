"""Attendance totals, computed fresh on every call."""
from __future__ import annotations

from typing import Iterable, Optional

from instaq.models.attendance import AttendanceRecord, AttendanceStats, QRCodeData
from instaq.models.user import User
from instaq.rbac import authorize


def date_filter(date: Optional[str]) -> dict:
    query: dict = {}
    if date:
        query["qr_code_data.date"] = date
    return query


def summarize(scans: Iterable[QRCodeData]) -> AttendanceStats:
    """Reduce scans into totals. An empty input gives all zeros."""
    stats = AttendanceStats()
    for scan in scans:
        stats.total_scans += 1
        for member in scan.family_members:
            stats.total_members += 1
            if member.is_child:
                stats.total_children += 1
            else:
                stats.total_adults += 1
    return stats


async def compute_stats(user: Optional[User], date: Optional[str] = None) -> AttendanceStats:
    authorize(user, "stats")
    records = await AttendanceRecord.find(date_filter(date)).to_list()
    return summarize(record.qr_code_data for record in records)
