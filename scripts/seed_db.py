#!/usr/bin/env python3
"""
Seed the database with the admin account and, optionally, sample data.
Run from the project root:

    ADMIN_INITIAL_PASSWORD='YourSecurePassword123!' python3 scripts/seed_db.py
    ADMIN_INITIAL_PASSWORD='...' python3 scripts/seed_db.py --samples

Sample residents log in with resident123, providers with provider123 and
employees with employee123. Existing records (matched by their unique key)
are left untouched.
"""
import json
import os
import sys
from datetime import date, timedelta
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from residential_api.config import get_config
from residential_api.db.mongo import ensure_indexes, get_database
from residential_api.services.auth_service import hash_password
from residential_api.services.employee_service import next_employee_id
from residential_api.services.guest_service import visit_window
from residential_api.utils.datetime_utils import date_to_datetime, get_now_local, get_now_utc

SAMPLE_RESIDENTS = [
    {
        "name": "John Smith", "apartment": "A-101", "phone": "+1-234-567-8901",
        "email": "john.smith@example.com", "username": "johnsmith", "family_members": 4,
        "id_document_type": "CNIC", "cnic_number": "42101-1234567-8", "ownership_type": "OWNER",
        "occupation": "Software Engineer", "emergency_contact": "Jane Smith",
        "emergency_contact_phone": "+1-234-567-8902",
    },
    {
        "name": "Sarah Johnson", "apartment": "B-205", "phone": "+1-987-654-3210",
        "email": "sarah.johnson@example.com", "username": "sarahjohnson", "family_members": 2,
        "id_document_type": "PASSPORT", "passport_number": "AB1234567", "ownership_type": "TENANT",
        "occupation": "Doctor", "emergency_contact": "Mike Johnson",
        "emergency_contact_phone": "+1-987-654-3211",
    },
    {
        "name": "Ahmed Khan", "apartment": "C-301", "phone": "+92-300-1234567",
        "email": "ahmed.khan@example.com", "username": "ahmedkhan", "family_members": 5,
        "id_document_type": "CNIC", "cnic_number": "42201-7654321-0", "ownership_type": "OWNER",
        "occupation": "Accountant",
    },
]

SAMPLE_PROVIDERS = [
    {
        "name": "Quick Fix Plumbing", "username": "quickfix", "email": "contact@quickfix.example.com",
        "phone": "+1-555-010-2000", "id_document_type": "CNIC", "cnic_number": "42101-5555555-5",
        "service_category": "Plumbing", "keywords": "leaks, pipes, drains",
        "short_intro": "Same-day plumbing repairs", "experience": "10 years",
        "availability": "Mon-Sat 8:00-18:00", "service_area": "Blocks A-C",
    },
    {
        "name": "Bright Spark Electric", "username": "brightspark", "email": "hello@brightspark.example.com",
        "phone": "+1-555-010-3000", "id_document_type": "DRIVER_LICENSE", "driver_license_number": "DL-88231",
        "service_category": "Electrical", "keywords": "wiring, lighting, breakers",
        "short_intro": "Licensed electricians", "experience": "7 years",
        "availability": "Mon-Fri 9:00-17:00", "service_area": "All blocks",
    },
]

SAMPLE_EMPLOYEES = [
    {
        "name": "Robert Wilson", "designation": "Security Guard", "department": "Security",
        "email": "robert.wilson@example.com", "phone": "+1-555-020-1000",
        "address": "12 Gate Road", "id_document_type": "CNIC", "cnic_number": "42101-1111111-1",
        "emergency_contact": "Mary Wilson", "emergency_contact_phone": "+1-555-020-1001",
    },
    {
        "name": "Linda Garcia", "designation": "Maintenance Supervisor", "department": "Maintenance",
        "email": "linda.garcia@example.com", "phone": "+1-555-020-2000",
        "address": "4 Service Lane", "id_document_type": "PASSPORT", "passport_number": "CD7654321",
        "emergency_contact": "Carlos Garcia", "emergency_contact_phone": "+1-555-020-2001",
    },
]


def _insert_missing(col, key: str, doc: dict) -> str:
    """Insert doc unless one with the same key exists; returns the document id."""
    existing = col.find_one({key: doc[key]}, {"_id": 1})
    if existing:
        print(f"  ⏭️  {col.name}: {doc[key]} already exists")
        return str(existing["_id"])
    now = get_now_utc()
    result = col.insert_one({**doc, "created_at": now, "updated_at": now})
    print(f"  ✅ {col.name}: {doc[key]}")
    return str(result.inserted_id)


def seed_admin(db, rounds: int) -> None:
    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_INITIAL_PASSWORD")

    if not password:
        print("ERROR: ADMIN_INITIAL_PASSWORD environment variable is required.")
        print("Usage: ADMIN_INITIAL_PASSWORD='YourSecurePassword123!' python3 scripts/seed_db.py")
        sys.exit(1)

    if len(password) < 12:
        print("ERROR: ADMIN_INITIAL_PASSWORD must be at least 12 characters long.")
        sys.exit(1)

    now = get_now_utc()
    password_hash = hash_password(password, rounds)
    if db["admins"].find_one({"username": username}, {"_id": 1}):
        db["admins"].update_one({"username": username}, {"$set": {"password_hash": password_hash, "updated_at": now}})
        print(f"Updated admin user: username={username}")
    else:
        db["admins"].insert_one({
            "username": username,
            "password_hash": password_hash,
            "email": os.getenv("ADMIN_EMAIL", "admin@residentialapp.com"),
            "name": "System Administrator",
            "role": "admin",
            "created_at": now,
            "updated_at": now,
        })
        print(f"Created admin user: username={username}")


def seed_samples(db, rounds: int) -> None:
    print("\n🌱 Seeding sample data...")
    resident_hash = hash_password("resident123", rounds)
    resident_ids = []
    for r in SAMPLE_RESIDENTS:
        doc = {**r, "password_hash": resident_hash, "status": "ACTIVE", "approval_status": "APPROVED"}
        resident_ids.append(_insert_missing(db["residents"], "email", doc))

    provider_hash = hash_password("provider123", rounds)
    for p in SAMPLE_PROVIDERS:
        doc = {
            **p, "password_hash": provider_hash, "status": "ACTIVE",
            "rating": 0.0, "total_reviews": 0, "completed_jobs": 0,
        }
        _insert_missing(db["service_providers"], "email", doc)

    employee_hash = hash_password("employee123", rounds)
    for e in SAMPLE_EMPLOYEES:
        doc = {
            **e, "password_hash": employee_hash, "status": "ACTIVE",
            "employee_id": next_employee_id(db["employees"].distinct("employee_id")),
            "joining_date": date_to_datetime(date(2023, 1, 15)),
        }
        _insert_missing(db["employees"], "email", doc)

    _insert_missing(db["vehicles"], "license_plate", {
        "resident_id": resident_ids[0], "service_provider_id": None, "vehicle_type": "CAR",
        "make": "Toyota", "model": "Corolla", "year": 2020, "color": "White",
        "license_plate": "ABC-123", "qr_code": None,
    })

    today = get_now_local().date()
    month, year = today.strftime("%B"), today.year
    for rid in resident_ids:
        if db["maintenance_bills"].find_one({"resident_id": rid, "month": month, "year": year}, {"_id": 1}):
            continue
        now = get_now_utc()
        db["maintenance_bills"].insert_one({
            "resident_id": rid, "month": month, "year": year, "amount": 150.0,
            "due_date": date_to_datetime(today + timedelta(days=15)), "paid_date": None, "status": "PENDING",
            "items": [
                {"description": "Maintenance fee", "amount": 120.0, "type": "FIXED"},
                {"description": "Water charges", "amount": 30.0, "type": "VARIABLE"},
            ],
            "created_at": now, "updated_at": now,
        })
        print(f"  ✅ maintenance_bills: {rid} {month} {year}")

    if not db["announcements"].count_documents({}):
        now = get_now_utc()
        db["announcements"].insert_one({
            "title": "Welcome to the community portal",
            "type": "General",
            "priority": "LOW",
            "description": "Residents can now register guests and deliveries online.",
            "created_by": "System Administrator",
            "created_at": now,
            "updated_at": now,
        })
        print("  ✅ announcements: welcome notice")

    now = get_now_utc()
    if not db["complaints"].count_documents({"resident_id": resident_ids[0]}):
        db["complaints"].insert_one({
            "resident_id": resident_ids[0], "title": "Corridor light not working",
            "category": "Electrical", "priority": "MEDIUM",
            "description": "The light outside A-101 has been off for three days.",
            "images": [], "status": "OPEN", "admin_response": None, "response_date": None,
            "created_at": now, "updated_at": now,
        })
        print("  ✅ complaints: sample complaint")

    if not db["guests"].count_documents({"resident_id": resident_ids[1]}):
        host = SAMPLE_RESIDENTS[1]
        visit_day = today + timedelta(days=1)
        valid_from, valid_until = visit_window(visit_day, "10:00", "18:00")
        qr_code = json.dumps({
            "type": "guest_entry", "guestName": "Emily Brown", "hostApartment": host["apartment"],
            "hostName": host["name"], "purpose": "Family visit", "vehicleType": "None", "licensePlate": "",
            "validFrom": valid_from, "validUntil": valid_until, "idNumber": "P-99812",
            "idType": "PASSPORT", "phone": "+1-555-030-4000",
        })
        db["guests"].insert_one({
            "resident_id": resident_ids[1], "guest_name": "Emily Brown", "purpose": "Family visit",
            "visit_date": date_to_datetime(visit_day), "time_from": "10:00", "time_to": "18:00",
            "vehicle_type": None, "license_plate": None, "id_number": "P-99812", "id_type": "PASSPORT",
            "phone": "+1-555-030-4000", "qr_code": qr_code, "status": "ACTIVE",
            "created_at": now, "updated_at": now,
        })
        print("  ✅ guests: sample guest")

    if not db["gate_entries"].count_documents({}):
        db["gate_entries"].insert_one({
            "type": "ENTRY", "person": "John Smith", "apartment": "A-101", "entry_type": "Resident",
            "vehicle": "None", "gate": "Main Gate", "method": "Manual", "resident_id": resident_ids[0],
            "created_at": now, "updated_at": now,
        })
        print("  ✅ gate_entries: sample entry")


def main():
    config = get_config()
    db = get_database(config)
    ensure_indexes(db)
    seed_admin(db, config.auth.bcrypt_rounds)
    if "--samples" in sys.argv[1:]:
        seed_samples(db, config.auth.bcrypt_rounds)
    print("Done.")


if __name__ == "__main__":
    main()
