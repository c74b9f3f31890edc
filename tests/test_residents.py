"""
Tests for the resident registry and self-service profile.
"""

import json


def test_list_residents_requires_admin(client, make_resident):
    resident = make_resident()
    assert client.get("/api/residents").status_code == 401
    response = client.get("/api/residents", headers=resident["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_list_residents_paginates_and_searches(client, admin, make_resident):
    for _ in range(12):
        make_resident()
    make_resident(name="Zed Unique")

    response = client.get("/api/residents?page=2&limit=5", headers=admin["headers"])
    assert response.status_code == 200
    body = response.json()
    assert len(body["residents"]) == 5
    assert body["pagination"] == {"page": 2, "limit": 5, "total": 13, "pages": 3}
    assert body["residents"][0]["counts"] == {"vehicles": 0, "complaints": 0, "service_bookings": 0}
    assert all("password_hash" not in r for r in body["residents"])

    response = client.get("/api/residents?search=zed", headers=admin["headers"])
    names = [r["name"] for r in response.json()["residents"]]
    assert names == ["Zed Unique"]


def test_list_residents_sort_and_status_filter(client, admin, make_resident):
    make_resident(name="Charlie")
    make_resident(name="Alice")
    make_resident(name="Bob", status="INACTIVE")

    response = client.get("/api/residents?sort=name", headers=admin["headers"])
    assert [r["name"] for r in response.json()["residents"]] == ["Alice", "Bob", "Charlie"]

    response = client.get("/api/residents?sort=name&order=desc", headers=admin["headers"])
    assert [r["name"] for r in response.json()["residents"]] == ["Charlie", "Bob", "Alice"]

    response = client.get("/api/residents?status=INACTIVE", headers=admin["headers"])
    assert [r["name"] for r in response.json()["residents"]] == ["Bob"]


def test_list_residents_rejects_bad_limit(client, admin):
    assert client.get("/api/residents?limit=500", headers=admin["headers"]).status_code == 422
    assert client.get("/api/residents?page=0", headers=admin["headers"]).status_code == 422


def test_resident_stats(client, admin, make_resident):
    make_resident()
    make_resident(status="PENDING", approval_status="PENDING")
    response = client.get("/api/residents/stats/overview", headers=admin["headers"])
    assert response.status_code == 200
    stats = response.json()["statistics"]
    assert stats["total_residents"] == 2
    assert stats["active_residents"] == 1
    assert stats["pending_approvals"] == 1
    assert len(stats["recent_registrations"]) == 2


def test_resident_can_read_only_own_profile(client, make_resident):
    alice = make_resident()
    bob = make_resident()

    response = client.get(f"/api/residents/{alice['id']}", headers=alice["headers"])
    assert response.status_code == 200
    resident = response.json()["resident"]
    assert resident["email"] == alice["email"]
    assert resident["vehicles"] == []
    assert "password_hash" not in resident

    response = client.get(f"/api/residents/{bob['id']}", headers=alice["headers"])
    assert response.status_code == 403


def test_get_unknown_resident(client, admin):
    response = client.get("/api/residents/64b000000000000000000000", headers=admin["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Resident not found"


def test_update_resident(client, admin, make_resident):
    resident = make_resident()
    response = client.patch(
        f"/api/residents/{resident['id']}",
        json={"occupation": "Teacher", "family_members": 5},
        headers=resident["headers"],
    )
    assert response.status_code == 200
    updated = response.json()["resident"]
    assert updated["occupation"] == "Teacher"
    assert updated["family_members"] == 5
    assert updated["name"] == resident["name"]


def test_update_resident_apartment_clash(client, admin, make_resident):
    alice = make_resident()
    bob = make_resident()
    response = client.patch(
        f"/api/residents/{alice['id']}",
        json={"apartment": bob["apartment"]},
        headers=admin["headers"],
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Apartment already registered"


def test_update_resident_keeps_own_email(client, make_resident):
    resident = make_resident()
    response = client.patch(
        f"/api/residents/{resident['id']}",
        json={"email": resident["email"]},
        headers=resident["headers"],
    )
    assert response.status_code == 200


def test_update_password_can_log_in(client, make_resident, db):
    resident = make_resident()
    client.patch(
        f"/api/residents/{resident['id']}",
        json={"password": "newsecret"},
        headers=resident["headers"],
    )
    response = client.post("/api/auth/resident/login", json={"email": resident["email"], "password": "newsecret"})
    assert response.status_code == 200


def test_reject_resident(client, admin, make_resident):
    resident = make_resident(status="PENDING", approval_status="PENDING")
    response = client.patch(
        f"/api/residents/{resident['id']}/approval",
        json={"approval_status": "REJECTED"},
        headers=admin["headers"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Resident rejected successfully"
    assert body["resident"]["status"] == "REJECTED"
    assert body["resident"]["approval_status"] == "REJECTED"


def test_approval_rejects_unknown_value(client, admin, make_resident):
    resident = make_resident()
    response = client.patch(
        f"/api/residents/{resident['id']}/approval",
        json={"approval_status": "MAYBE"},
        headers=admin["headers"],
    )
    assert response.status_code == 422


def test_resident_qr_code(client, make_resident):
    resident = make_resident()
    response = client.get(f"/api/residents/{resident['id']}/qr-code", headers=resident["headers"])
    assert response.status_code == 200
    payload = json.loads(response.json()["qr_code"])
    assert payload == {
        "type": "resident_entry",
        "residentId": resident["id"],
        "residentName": resident["name"],
        "apartment": resident["apartment"],
        "phone": resident["phone"],
    }


def test_delete_resident_cascades(client, admin, make_resident, db):
    resident = make_resident()
    client.post(
        "/api/vehicles",
        json={"vehicle_type": "CAR", "make": "Honda", "model": "Civic", "year": 2021,
              "color": "Blue", "license_plate": "DEL-1"},
        headers=resident["headers"],
    )
    client.post(
        "/api/complaints",
        json={"title": "Noise", "category": "Noise", "priority": "LOW", "description": "Loud music every night"},
        headers=resident["headers"],
    )
    assert db["vehicles"].count_documents({"resident_id": resident["id"]}) == 1

    response = client.delete(f"/api/residents/{resident['id']}", headers=admin["headers"])
    assert response.status_code == 200
    assert db["residents"].count_documents({}) == 0
    assert db["vehicles"].count_documents({"resident_id": resident["id"]}) == 0
    assert db["complaints"].count_documents({"resident_id": resident["id"]}) == 0
