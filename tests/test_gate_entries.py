"""
Tests for the gate log: QR scans, the ENTRY/EXIT toggle and daily stats.
"""

import json
from datetime import datetime, time, timedelta, timezone

from residential_api.services import gate_entry_service
from residential_api.utils.datetime_utils import LOCAL_TZ, get_now_local


def scan(client, admin, qr_data):
    return client.post("/api/gate-entries/qr-scan", json={"qr_data": qr_data}, headers=admin["headers"])


def _resident_qr(client, resident):
    return client.get(f"/api/residents/{resident['id']}/qr-code", headers=resident["headers"]).json()["qr_code"]


def test_resident_scan_toggles_entry_and_exit(client, admin, make_resident):
    resident = make_resident()
    qr = _resident_qr(client, resident)

    first = scan(client, admin, qr)
    assert first.status_code == 201
    body = first.json()
    assert body["type"] == "ENTRY"
    assert body["person"] == resident["name"]
    assert body["apartment"] == resident["apartment"]
    assert body["entry"]["entry_type"] == "Resident"
    assert body["entry"]["gate"] == "Main Gate"
    assert body["entry"]["method"] == "QR Code"
    assert body["entry"]["resident_id"] == resident["id"]

    assert scan(client, admin, qr).json()["type"] == "EXIT"
    assert scan(client, admin, qr).json()["type"] == "ENTRY"


def test_toggle_is_per_person(client, admin, make_resident):
    alice = make_resident()
    bob = make_resident()
    assert scan(client, admin, _resident_qr(client, alice)).json()["type"] == "ENTRY"
    assert scan(client, admin, _resident_qr(client, bob)).json()["type"] == "ENTRY"
    assert scan(client, admin, _resident_qr(client, alice)).json()["type"] == "EXIT"


def test_guest_scan_within_window(client, admin, make_resident, monkeypatch):
    resident = make_resident()
    visit_day = get_now_local().date()
    today = visit_day.isoformat()
    guest = client.post(
        "/api/guests",
        json={
            "guest_name": "Emily Brown", "purpose": "Visit", "visit_date": today,
            "time_from": "00:00", "time_to": "23:59", "license_plate": "XYZ-1", "vehicle_type": "CAR",
            "id_number": "P-1", "id_type": "PASSPORT", "phone": "+1-555-030-4000",
        },
        headers=resident["headers"],
    ).json()["guest"]

    noon = datetime.combine(visit_day, time(12, 0), tzinfo=LOCAL_TZ)
    monkeypatch.setattr(gate_entry_service, "get_now_utc", lambda: noon.astimezone(timezone.utc))

    response = scan(client, admin, guest["qr_code"])
    assert response.status_code == 201
    entry = response.json()["entry"]
    assert entry["type"] == "ENTRY"
    assert entry["entry_type"] == "Guest"
    assert entry["vehicle"] == "CAR (XYZ-1)"
    assert entry["resident_id"] == resident["id"]
    assert entry["resident"]["name"] == resident["name"]


def test_expired_guest_qr_is_rejected(client, admin, db):
    yesterday = (get_now_local().date() - timedelta(days=1)).isoformat()
    qr = json.dumps({
        "type": "guest_entry", "guestName": "Late Larry", "hostApartment": "A-101",
        "hostName": "Someone", "purpose": "Visit", "vehicleType": "None", "licensePlate": "",
        "validFrom": f"{yesterday}T10:00:00", "validUntil": f"{yesterday}T12:00:00",
        "idNumber": "1", "idType": "CNIC", "phone": "+1-555-000-0000",
    })
    response = scan(client, admin, qr)
    assert response.status_code == 400
    assert response.json()["detail"] == "QR Code expired"
    assert db["gate_entries"].count_documents({}) == 0


def test_future_guest_qr_is_rejected(client, admin):
    tomorrow = (get_now_local().date() + timedelta(days=1)).isoformat()
    qr = json.dumps({
        "type": "guest_entry", "guestName": "Early Eve", "hostApartment": "A-101",
        "validFrom": f"{tomorrow}T10:00:00", "validUntil": f"{tomorrow}T12:00:00",
    })
    assert scan(client, admin, qr).status_code == 400


def test_vehicle_scan(client, admin, make_resident):
    resident = make_resident()
    vehicle = client.post(
        "/api/vehicles",
        json={"vehicle_type": "CAR", "make": "Honda", "model": "Civic", "year": 2022,
              "color": "Grey", "license_plate": "HND-42"},
        headers=resident["headers"],
    ).json()["vehicle"]

    entry = scan(client, admin, vehicle["qr_code"]).json()["entry"]
    assert entry["entry_type"] == "Resident Vehicle"
    assert entry["vehicle"] == "Honda Civic (HND-42)"
    assert entry["type"] == "ENTRY"


def test_delivery_provider_and_employee_scans(client, admin, make_resident, make_provider):
    resident = make_resident()
    delivery = client.post(
        "/api/deliveries",
        json={"rider_name": "Ali Rider", "id_number": "1", "id_type": "CNIC",
              "company_name": "FoodExpress", "description": "Dinner"},
        headers=resident["headers"],
    ).json()["delivery"]
    entry = scan(client, admin, delivery["qr_code"]).json()["entry"]
    assert entry["entry_type"] == "Delivery"
    assert entry["vehicle"] == "FoodExpress"
    assert entry["apartment"] == resident["apartment"]

    provider = make_provider()
    qr = client.get(f"/api/service-providers/{provider['id']}/qr-code", headers=provider["headers"]).json()["qr_code"]
    entry = scan(client, admin, qr).json()["entry"]
    assert entry["entry_type"] == "Service Provider"
    assert entry["apartment"] == "Service Provider"

    employee = client.post(
        "/api/employees",
        json={
            "name": "Robert Guard", "designation": "Guard", "department": "Security",
            "email": "robert@example.com", "phone": "+1-555-777-8888", "address": "1 Gate Road",
            "id_document_type": "CNIC", "emergency_contact": "Mary", "emergency_contact_phone": "+1-555-777-9999",
            "joining_date": "2024-03-01",
        },
        headers=admin["headers"],
    ).json()["employee"]
    qr = client.get(f"/api/employees/{employee['id']}/qr-code", headers=admin["headers"]).json()["qr_code"]
    entry = scan(client, admin, qr).json()["entry"]
    assert entry["entry_type"] == "Employee"
    assert entry["apartment"] == "Security"


def test_scan_errors(client, admin):
    response = scan(client, admin, None)
    assert response.status_code == 400
    assert response.json()["detail"] == "QR code data is required"

    response = scan(client, admin, "{not json")
    assert response.status_code == 400
    assert response.json()["detail"] == "QR code data is not valid JSON"

    response = scan(client, admin, json.dumps({"type": "alien_entry"}))
    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown QR code type: alien_entry"

    response = scan(client, admin, json.dumps({"type": "resident_entry"}))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid QR code: missing")


def test_scan_rejects_non_string_fields(client, admin, db):
    today = get_now_local().date().isoformat()
    guest = {
        "type": "guest_entry", "guestName": "Numeric Nina", "hostApartment": "A-101",
        "validFrom": 1700000000, "validUntil": f"{today}T23:59:00",
    }
    response = scan(client, admin, json.dumps(guest))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid QR code: bad validFrom"

    response = scan(client, admin, json.dumps({"type": "resident_entry", "residentName": {"x": 1}, "apartment": "A-101"}))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid QR code: bad residentName"

    response = scan(client, admin, json.dumps({"type": "employee_entry", "employeeName": "Eve", "department": ["Security"]}))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid QR code: bad department"

    response = scan(client, admin, json.dumps({"type": ["resident_entry"]}))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Unknown QR code type")

    assert db["gate_entries"].count_documents({}) == 0


def test_toggle_breaks_created_at_ties_by_insertion_order(client, admin, db):
    stamp = get_now_local().astimezone(timezone.utc)
    key = {"person": "Tied Tom", "apartment": "A-101", "entry_type": "Resident"}
    db["gate_entries"].insert_one({**key, "type": "ENTRY", "created_at": stamp, "updated_at": stamp})
    db["gate_entries"].insert_one({**key, "type": "EXIT", "created_at": stamp, "updated_at": stamp})

    qr = json.dumps({"type": "resident_entry", "residentName": "Tied Tom", "apartment": "A-101"})
    assert scan(client, admin, qr).json()["type"] == "ENTRY"

    other = {"person": "Tied Tina", "apartment": "A-102", "entry_type": "Resident"}
    db["gate_entries"].insert_one({**other, "type": "EXIT", "created_at": stamp, "updated_at": stamp})
    db["gate_entries"].insert_one({**other, "type": "ENTRY", "created_at": stamp, "updated_at": stamp})

    qr = json.dumps({"type": "resident_entry", "residentName": "Tied Tina", "apartment": "A-102"})
    assert scan(client, admin, qr).json()["type"] == "EXIT"


def test_gate_log_is_admin_only(client, make_resident):
    resident = make_resident()
    assert client.get("/api/gate-entries", headers=resident["headers"]).status_code == 403
    assert scan(client, {"headers": resident["headers"]}, "{}").status_code == 403


def test_manual_entry_and_listing(client, admin):
    response = client.post(
        "/api/gate-entries",
        json={"type": "ENTRY", "person": "Plumber Pete", "apartment": "C-301", "entry_type": "Visitor"},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    entry = response.json()["entry"]
    assert entry["method"] == "Manual"
    assert entry["gate"] == "Main Gate"

    client.post(
        "/api/gate-entries",
        json={"type": "EXIT", "person": "Plumber Pete", "apartment": "C-301", "entry_type": "Visitor",
              "gate": "Back Gate", "method": "Logbook"},
        headers=admin["headers"],
    )
    response = client.get("/api/gate-entries", headers=admin["headers"])
    body = response.json()
    assert body["pagination"]["limit"] == 20
    assert body["pagination"]["total"] == 2
    assert [e["type"] for e in body["entries"]] == ["EXIT", "ENTRY"]
    assert body["entries"][0]["gate"] == "Back Gate"

    response = client.get("/api/gate-entries?search=back", headers=admin["headers"])
    assert response.json()["pagination"]["total"] == 0
    response = client.get("/api/gate-entries?search=pete", headers=admin["headers"])
    assert response.json()["pagination"]["total"] == 2


def test_manual_entry_validation(client, admin):
    response = client.post(
        "/api/gate-entries",
        json={"type": "INSIDE", "person": "X", "apartment": "Y", "entry_type": "Visitor"},
        headers=admin["headers"],
    )
    assert response.status_code == 422


def test_today_stats(client, admin, make_resident):
    alice = make_resident()
    bob = make_resident()
    qr = _resident_qr(client, alice)
    scan(client, admin, qr)
    scan(client, admin, qr)
    scan(client, admin, _resident_qr(client, bob))
    client.post(
        "/api/gate-entries",
        json={"type": "ENTRY", "person": "Guest Gina", "apartment": "A-101", "entry_type": "Guest"},
        headers=admin["headers"],
    )

    response = client.get("/api/gate-entries/stats/today", headers=admin["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["statistics"] == {
        "total_entries": 3,
        "total_exits": 1,
        "current_occupancy": 2,
        "guest_entries": 1,
        "vehicle_entries": 0,
    }
    assert body["entry_type_stats"] == [
        {"entry_type": "Guest", "count": 1},
        {"entry_type": "Resident", "count": 3},
    ]


def test_delete_gate_entry(client, admin, db):
    entry = client.post(
        "/api/gate-entries",
        json={"type": "ENTRY", "person": "X", "apartment": "Y", "entry_type": "Visitor"},
        headers=admin["headers"],
    ).json()["entry"]
    assert client.delete(f"/api/gate-entries/{entry['id']}", headers=admin["headers"]).status_code == 200
    assert db["gate_entries"].count_documents({}) == 0
    assert client.delete(f"/api/gate-entries/{entry['id']}", headers=admin["headers"]).status_code == 404
