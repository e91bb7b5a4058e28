"""Tests for attendance aggregation."""

from instaq.models.attendance import AttendanceStats, FamilyMember, QRCodeData
from instaq.services.stats import date_filter, summarize


def scan(adults: int, children: int, date: str = "2024-06-02") -> QRCodeData:
    members = [FamilyMember(name=f"Adult {i}", age=30 + i) for i in range(adults)]
    members += [FamilyMember(name=f"Child {i}", age=3 + i, is_child=True) for i in range(children)]
    return QRCodeData(date=date, time="09:00", family_members=members)


class TestSummarize:
    def test_no_scans_gives_zeros(self):
        assert summarize([]) == AttendanceStats(total_scans=0, total_members=0, total_adults=0, total_children=0)

    def test_sums_across_scans(self):
        stats = summarize([scan(2, 1), scan(1, 0), scan(0, 3)])
        assert stats.total_scans == 3
        assert stats.total_members == 7
        assert stats.total_adults == 3
        assert stats.total_children == 4

    def test_accepts_generators(self):
        stats = summarize(s for s in [scan(1, 1)])
        assert stats.total_members == 2

    def test_serializes_camel_case(self):
        data = summarize([scan(1, 1)]).model_dump(by_alias=True)
        assert data == {"totalScans": 1, "totalMembers": 2, "totalAdults": 1, "totalChildren": 1}


class TestDateFilter:
    def test_no_date_matches_everything(self):
        assert date_filter(None) == {}
        assert date_filter("") == {}

    def test_date_filters_on_qr_date(self):
        assert date_filter("2024-06-02") == {"qr_code_data.date": "2024-06-02"}
