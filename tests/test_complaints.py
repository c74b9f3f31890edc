"""
Tests for filing and answering complaints.
"""

COMPLAINT = {
    "title": "Broken elevator",
    "category": "Maintenance",
    "priority": "HIGH",
    "description": "Elevator in block B stops between floors.",
}


def test_resident_files_complaint(client, make_resident):
    resident = make_resident()
    response = client.post("/api/complaints", json=COMPLAINT, headers=resident["headers"])
    assert response.status_code == 201
    complaint = response.json()["complaint"]
    assert complaint["status"] == "OPEN"
    assert complaint["images"] == []
    assert complaint["resident_id"] == resident["id"]
    assert complaint["resident"] == {"id": resident["id"], "name": resident["name"], "apartment": resident["apartment"]}


def test_complaint_validation(client, make_resident):
    resident = make_resident()
    response = client.post("/api/complaints", json={**COMPLAINT, "description": "short"}, headers=resident["headers"])
    assert response.status_code == 422


def test_admin_cannot_file_complaint(client, admin):
    assert client.post("/api/complaints", json=COMPLAINT, headers=admin["headers"]).status_code == 403


def test_residents_see_only_their_complaints(client, admin, make_resident):
    alice = make_resident()
    bob = make_resident()
    client.post("/api/complaints", json=COMPLAINT, headers=alice["headers"])
    client.post("/api/complaints", json={**COMPLAINT, "title": "Water leak"}, headers=bob["headers"])

    response = client.get("/api/complaints", headers=alice["headers"])
    assert [c["title"] for c in response.json()["complaints"]] == ["Broken elevator"]

    response = client.get("/api/complaints", headers=admin["headers"])
    assert [c["title"] for c in response.json()["complaints"]] == ["Water leak", "Broken elevator"]


def test_admin_responds_to_complaint(client, admin, make_resident):
    resident = make_resident()
    complaint = client.post("/api/complaints", json=COMPLAINT, headers=resident["headers"]).json()["complaint"]

    response = client.patch(
        f"/api/complaints/{complaint['id']}",
        json={"status": "IN_PROGRESS", "admin_response": "Technician booked for Monday"},
        headers=admin["headers"],
    )
    assert response.status_code == 200
    updated = response.json()["complaint"]
    assert updated["status"] == "IN_PROGRESS"
    assert updated["admin_response"] == "Technician booked for Monday"
    assert updated["response_date"] is not None


def test_status_only_update_leaves_response_empty(client, admin, make_resident):
    resident = make_resident()
    complaint = client.post("/api/complaints", json=COMPLAINT, headers=resident["headers"]).json()["complaint"]
    response = client.patch(
        f"/api/complaints/{complaint['id']}",
        json={"status": "CLOSED"},
        headers=admin["headers"],
    )
    assert response.json()["complaint"]["status"] == "CLOSED"
    assert response.json()["complaint"]["response_date"] is None


def test_complaint_update_needs_a_change(client, admin, make_resident):
    resident = make_resident()
    complaint = client.post("/api/complaints", json=COMPLAINT, headers=resident["headers"]).json()["complaint"]
    response = client.patch(f"/api/complaints/{complaint['id']}", json={}, headers=admin["headers"])
    assert response.status_code == 400


def test_resident_cannot_update_complaint(client, make_resident):
    resident = make_resident()
    complaint = client.post("/api/complaints", json=COMPLAINT, headers=resident["headers"]).json()["complaint"]
    response = client.patch(
        f"/api/complaints/{complaint['id']}",
        json={"status": "CLOSED"},
        headers=resident["headers"],
    )
    assert response.status_code == 403


def test_update_unknown_complaint(client, admin):
    response = client.patch(
        "/api/complaints/64b000000000000000000000",
        json={"status": "CLOSED"},
        headers=admin["headers"],
    )
    assert response.status_code == 404
