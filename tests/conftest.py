"""Shared test fixtures."""
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from instaq import db
from instaq.config import settings
from instaq.main import app


def _scan_body(members=None, date="2024-06-02", time="10:30", **extra):
    """A valid scan submission as the mobile app sends it."""
    if members is None:
        members = [
            {"name": "John Doe", "age": 35, "isChild": False},
            {"name": "Baby Doe", "age": 5, "isChild": True},
        ]
    body = {
        "qrCodeData": {
            "type": "attendance",
            "date": date,
            "time": time,
            "familyMembers": members,
        }
    }
    body.update(extra)
    return body


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="client")
def client_fixture(monkeypatch):
    """Test client over a fresh in-memory MongoDB, with the admin seeded."""
    monkeypatch.setattr(db, "create_client", lambda: AsyncMongoMockClient())
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(client: TestClient) -> dict:
    response = client.post(
        "/api/auth/login",
        json={"email": settings.admin_email, "password": settings.admin_password},
    )
    assert response.status_code == 200
    return _bearer(response.json()["access_token"])


@pytest.fixture(name="staff_headers")
def staff_headers_fixture(client: TestClient) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"name": "Staff Member", "email": "staff.member@instaq.com", "password": "staff123"},
    )
    assert response.status_code == 201
    return _bearer(response.json()["access_token"])


@pytest.fixture(name="scan_id")
def scan_id_fixture(client: TestClient, staff_headers: dict) -> str:
    """A stored two-member scan submitted by staff."""
    response = client.post("/api/attendance/scan", json=_scan_body(), headers=staff_headers)
    assert response.status_code == 201
    return response.json()["data"]["attendance"]["id"]


@pytest.fixture(name="scan_body")
def scan_body_fixture():
    return _scan_body
