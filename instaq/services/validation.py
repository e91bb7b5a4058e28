"""Boundary schema for scan submissions.

The mobile client posts loosely typed JSON. ``validate_scan`` checks it against
an explicit Pydantic contract and reports every violation at once, as ordered
``FieldViolation`` pairs, instead of stopping at the first bad field.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional

import pydantic
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from instaq.exceptions import FieldViolation, ValidationError
from instaq.models.attendance import FamilyMember, GeoPoint, QRCodeData

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _number_as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# Dates and times scanned from older QR codes may arrive as bare numbers.
ScanText = Annotated[RequiredText, BeforeValidator(_number_as_text)]
OptionalText = Optional[Annotated[str, StringConstraints(strip_whitespace=True)]]

QR_CODE_FIELD = "qrCodeData"

# Messages keyed by the last element of a pydantic error location.
FIELD_MESSAGES = {
    "type": "Invalid QR code type",
    "date": "Date is required",
    "time": "Time is required",
    "familyMembers": "At least one family member is required",
    "name": "Family member name is required",
    "age": "Valid age is required",
    "isChild": "isChild must be a boolean",
    "phone": "Phone must be text",
    "address": "Address must be text",
    "emergencyContact": "Emergency contact must be text",
}


class _CamelInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class FamilyMemberIn(_CamelInput):
    name: RequiredText
    age: Annotated[int, Field(ge=0)]
    is_child: bool = False
    phone: OptionalText = None
    address: OptionalText = None
    emergency_contact: OptionalText = None

    @field_validator("age", mode="before")
    @classmethod
    def reject_bool_age(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("age must be an integer, not a boolean")
        return value


class QRCodeDataIn(_CamelInput):
    type: Literal["attendance"]
    date: ScanText
    time: ScanText
    family_members: Annotated[list[FamilyMemberIn], Field(min_length=1)]


class LocationIn(BaseModel):
    model_config = ConfigDict(extra="ignore")
    type: Literal["Point"] = "Point"
    coordinates: Annotated[list[float], Field(min_length=2, max_length=2)]


@dataclass(frozen=True)
class ScanData:
    """A submission that passed validation, in storage shape."""

    qr_code_data: QRCodeData
    location: GeoPoint
    notes: Optional[str] = None


def _field_path(prefix: str, loc: tuple) -> str:
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _violations(prefix: str, exc: pydantic.ValidationError, messages: dict[str, str]) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    seen: set[str] = set()
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        field = _field_path(prefix, loc)
        if field in seen:
            continue
        seen.add(field)
        if loc and isinstance(loc[-1], int):
            message = "Family member must be an object"
        else:
            key = loc[-1] if loc else ""
            message = messages.get(key, err.get("msg", "Invalid value"))
        violations.append(FieldViolation(field, message))
    return violations


def check_qr_code_data(data: Any) -> tuple[Optional[QRCodeData], list[FieldViolation]]:
    """Validate the ``qrCodeData`` object. Returns (value, []) or (None, violations)."""
    violations: list[FieldViolation] = []
    if not isinstance(data, dict):
        violations.append(FieldViolation(QR_CODE_FIELD, "QR code data is required"))
        data = {}
    try:
        parsed = QRCodeDataIn.model_validate(data)
    except pydantic.ValidationError as exc:
        violations.extend(_violations(QR_CODE_FIELD, exc, FIELD_MESSAGES))
        return None, violations
    if violations:
        return None, violations
    members = [FamilyMember.model_validate(m.model_dump()) for m in parsed.family_members]
    return QRCodeData(type=parsed.type, date=parsed.date, time=parsed.time, family_members=members), []


def check_location(data: Any) -> tuple[GeoPoint, list[FieldViolation]]:
    if data is None:
        return GeoPoint(), []
    try:
        parsed = LocationIn.model_validate(data)
    except pydantic.ValidationError:
        return GeoPoint(), [FieldViolation("location", "Location must be a GeoJSON point [longitude, latitude]")]
    return GeoPoint(coordinates=list(parsed.coordinates)), []


def check_notes(data: Any) -> tuple[Optional[str], list[FieldViolation]]:
    if data is None:
        return None, []
    if not isinstance(data, str):
        return None, [FieldViolation("notes", "Notes must be a string")]
    return data.strip() or None, []


def validate_scan(payload: Any) -> ScanData:
    """Validate a full scan body ``{qrCodeData, location?, notes?}``.

    Raises ``ValidationError`` listing all violations. Has no side effects.
    """
    body = payload if isinstance(payload, dict) else {}
    qr_code_data, violations = check_qr_code_data(body.get(QR_CODE_FIELD))
    location, location_violations = check_location(body.get("location"))
    notes, notes_violations = check_notes(body.get("notes"))
    violations = violations + location_violations + notes_violations
    if violations:
        raise ValidationError(violations)
    return ScanData(qr_code_data=qr_code_data, location=location, notes=notes)
