"""
Shared fixtures: the app runs against an in-memory mongomock client and
every test starts from empty collections.
"""

import itertools
import os

os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGODB_DB_NAME"] = "residential_test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "WARNING"

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from residential_api.config import get_config  # noqa: E402
from residential_api.db import mongo  # noqa: E402

mongo.set_client(mongomock.MongoClient())

from residential_api.main import app  # noqa: E402
from residential_api.services.auth_service import hash_password  # noqa: E402
from residential_api.services.container import auth_service  # noqa: E402
from residential_api.utils.datetime_utils import get_now_utc  # noqa: E402

TEST_ROUNDS = 4

_db = mongo.get_database(get_config())
mongo.ensure_indexes(_db)


def auth_headers(user_id: str, role: str) -> dict:
    token = auth_service.generate_token(user_id=user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def clean_db():
    for name in _db.list_collection_names():
        _db[name].delete_many({})
    yield


@pytest.fixture
def db():
    return _db


@pytest.fixture
def client():
    return TestClient(app)


def _insert(collection: str, doc: dict) -> str:
    now = get_now_utc()
    result = _db[collection].insert_one({**doc, "created_at": now, "updated_at": now})
    return str(result.inserted_id)


@pytest.fixture
def admin():
    admin_id = _insert("admins", {
        "username": "admin",
        "password_hash": hash_password("adminpass", TEST_ROUNDS),
        "email": "admin@example.com",
        "name": "Admin",
        "role": "admin",
    })
    return {"id": admin_id, "username": "admin", "headers": auth_headers(admin_id, "admin")}


@pytest.fixture
def make_resident():
    counter = itertools.count(1)

    def _make(status="ACTIVE", approval_status="APPROVED", password="resident123", **fields):
        n = next(counter)
        doc = {
            "name": f"Resident {n}",
            "apartment": f"A-{100 + n}",
            "phone": f"+1-555-000-{1000 + n}",
            "email": f"resident{n}@example.com",
            "family_members": 2,
            "id_document_type": "CNIC",
            "ownership_type": "OWNER",
            "status": status,
            "approval_status": approval_status,
        }
        doc.update(fields)
        if password:
            doc["password_hash"] = hash_password(password, TEST_ROUNDS)
        resident_id = _insert("residents", doc)
        public = {k: v for k, v in doc.items() if k != "password_hash"}
        return {**public, "id": resident_id, "headers": auth_headers(resident_id, "resident")}

    return _make


@pytest.fixture
def make_provider():
    counter = itertools.count(1)

    def _make(status="ACTIVE", password="provider123", **fields):
        n = next(counter)
        doc = {
            "name": f"Provider {n}",
            "username": f"provider{n}",
            "email": f"provider{n}@example.com",
            "phone": f"+1-555-100-{1000 + n}",
            "id_document_type": "CNIC",
            "service_category": "Plumbing",
            "keywords": "pipes",
            "short_intro": "Fixes pipes",
            "experience": "5 years",
            "availability": "Weekdays",
            "service_area": "Block A",
            "status": status,
            "rating": 0.0,
            "total_reviews": 0,
            "completed_jobs": 0,
            "password_hash": hash_password(password, TEST_ROUNDS),
        }
        doc.update(fields)
        provider_id = _insert("service_providers", doc)
        public = {k: v for k, v in doc.items() if k != "password_hash"}
        return {**public, "id": provider_id, "headers": auth_headers(provider_id, "service_provider")}

    return _make


def resident_registration(**overrides) -> dict:
    payload = {
        "name": "Jane Doe",
        "apartment": "B-201",
        "phone": "+1-555-222-3333",
        "email": "jane.doe@example.com",
        "family_members": 3,
        "password": "janepass",
        "id_document_type": "PASSPORT",
        "passport_number": "X1234567",
        "ownership_type": "TENANT",
    }
    payload.update(overrides)
    return payload


def provider_registration(**overrides) -> dict:
    payload = {
        "name": "Spark Electric",
        "username": "spark",
        "email": "spark@example.com",
        "phone": "+1-555-444-5555",
        "password": "sparkpass",
        "id_document_type": "DRIVER_LICENSE",
        "driver_license_number": "DL-1",
        "service_category": "Electrical",
        "keywords": "wiring",
        "short_intro": "Electrician",
        "experience": "3 years",
        "availability": "Weekends",
        "service_area": "Block C",
    }
    payload.update(overrides)
    return payload


def employee_payload(**overrides) -> dict:
    payload = {
        "name": "Robert Guard",
        "designation": "Security Guard",
        "department": "Security",
        "email": "robert@example.com",
        "phone": "+1-555-777-8888",
        "address": "1 Gate Road",
        "id_document_type": "CNIC",
        "cnic_number": "42101-0000000-1",
        "emergency_contact": "Mary Guard",
        "emergency_contact_phone": "+1-555-777-9999",
        "joining_date": "2024-03-01",
    }
    payload.update(overrides)
    return payload
