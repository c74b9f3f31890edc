"""
Tests for the per-role dashboards.
"""


def _book_and_complete(client, resident, provider, cost):
    booking = client.post(
        "/api/service-bookings",
        json={
            "service_provider_id": provider["id"],
            "service_category": "Plumbing",
            "description": "Replace the bathroom mixer tap",
            "scheduled_date": "2030-06-01",
            "scheduled_time": "11:00",
        },
        headers=resident["headers"],
    ).json()["booking"]
    client.patch(
        f"/api/service-bookings/{booking['id']}",
        json={"status": "COMPLETED", "actual_cost": cost},
        headers=provider["headers"],
    )
    return booking


def test_admin_dashboard(client, admin, make_resident, make_provider):
    resident = make_resident()
    make_resident(status="PENDING", approval_status="PENDING")
    make_provider()
    make_provider(status="PENDING")
    client.post(
        "/api/complaints",
        json={"title": "Broken gate", "category": "Security", "priority": "HIGH",
              "description": "The side gate does not lock."},
        headers=resident["headers"],
    )
    qr = client.get(f"/api/residents/{resident['id']}/qr-code", headers=resident["headers"]).json()["qr_code"]
    client.post("/api/gate-entries/qr-scan", json={"qr_data": qr}, headers=admin["headers"])

    response = client.get("/api/dashboard/admin/stats", headers=admin["headers"])
    assert response.status_code == 200
    body = response.json()
    stats = body["statistics"]
    assert stats["residents"] == {"total": 2, "active": 1, "pending_approvals": 1}
    assert stats["service_providers"] == {"total": 2, "active": 1, "pending": 1}
    assert stats["complaints"]["open"] == 1
    assert stats["gate_entries"]["today"] == 1
    assert len(body["recent_activities"]["complaints"]) == 1
    assert body["recent_activities"]["gate_entries"][0]["resident"]["name"] == resident["name"]


def test_resident_dashboard(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    _book_and_complete(client, resident, provider, 60.0)

    response = client.get("/api/dashboard/resident/stats", headers=resident["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["statistics"]["service_bookings"] == {"total": 1, "pending": 0}
    assert body["statistics"]["bills"] == {"total": 0, "unpaid": 0, "overdue_amount": 0}
    assert body["recent_activities"]["bookings"][0]["service_provider"]["name"] == provider["name"]


def test_service_provider_dashboard(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    booking = _book_and_complete(client, resident, provider, 60.0)
    _book_and_complete(client, resident, provider, 40.0)
    client.post(
        f"/api/service-bookings/{booking['id']}/review",
        json={"rating": 4, "review": "Tidy and on time"},
        headers=resident["headers"],
    )

    response = client.get("/api/dashboard/service-provider/stats", headers=provider["headers"])
    assert response.status_code == 200
    stats = response.json()["statistics"]
    assert stats["bookings"] == {"total": 2, "pending": 0, "completed": 2}
    assert stats["earnings"]["total"] == 100.0
    assert stats["reviews"] == {"total": 1, "average_rating": 4.0}
    assert response.json()["recent_activities"]["reviews"][0]["resident"]["name"] == resident["name"]


def test_dashboards_check_role(client, admin, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    assert client.get("/api/dashboard/admin/stats", headers=resident["headers"]).status_code == 403
    assert client.get("/api/dashboard/resident/stats", headers=provider["headers"]).status_code == 403
    assert client.get("/api/dashboard/service-provider/stats", headers=admin["headers"]).status_code == 403
