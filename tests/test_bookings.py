"""
Tests for service bookings, their status flow and reviews.
"""

from datetime import date, timedelta


def booking_payload(provider_id, **overrides):
    payload = {
        "service_provider_id": provider_id,
        "service_category": "Plumbing",
        "description": "Kitchen sink is leaking badly",
        "scheduled_date": (date.today() + timedelta(days=2)).isoformat(),
        "scheduled_time": "10:00",
    }
    payload.update(overrides)
    return payload


def _book(client, resident, provider):
    response = client.post("/api/service-bookings", json=booking_payload(provider["id"]), headers=resident["headers"])
    assert response.status_code == 201
    return response.json()["booking"]


def test_resident_books_active_provider(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    booking = _book(client, resident, provider)
    assert booking["status"] == "PENDING"
    assert booking["priority"] == "MEDIUM"
    assert booking["resident_id"] == resident["id"]
    assert booking["resident_name"] == resident["name"]
    assert booking["service_provider"]["name"] == provider["name"]
    assert booking["resident"]["apartment"] == resident["apartment"]


def test_booking_unknown_or_inactive_provider(client, make_resident, make_provider):
    resident = make_resident()
    response = client.post(
        "/api/service-bookings",
        json=booking_payload("64b000000000000000000000"),
        headers=resident["headers"],
    )
    assert response.status_code == 404

    suspended = make_provider(status="SUSPENDED")
    response = client.post("/api/service-bookings", json=booking_payload(suspended["id"]), headers=resident["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Service provider is not available"


def test_bookings_listed_per_role(client, admin, make_resident, make_provider):
    alice = make_resident()
    bob = make_resident()
    plumber = make_provider()
    electrician = make_provider(service_category="Electrical")
    _book(client, alice, plumber)
    _book(client, bob, electrician)

    assert len(client.get("/api/service-bookings", headers=alice["headers"]).json()["bookings"]) == 1
    assert len(client.get("/api/service-bookings", headers=plumber["headers"]).json()["bookings"]) == 1
    assert len(client.get("/api/service-bookings", headers=admin["headers"]).json()["bookings"]) == 2


def test_provider_completes_booking_and_counts_job(client, db, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    booking = _book(client, resident, provider)

    response = client.patch(
        f"/api/service-bookings/{booking['id']}",
        json={"status": "COMPLETED", "actual_cost": 80.0},
        headers=provider["headers"],
    )
    assert response.status_code == 200
    updated = response.json()["booking"]
    assert updated["status"] == "COMPLETED"
    assert updated["actual_cost"] == 80.0
    assert updated["completion_date"] is not None

    # a second COMPLETED update must not count the job twice
    client.patch(f"/api/service-bookings/{booking['id']}", json={"status": "COMPLETED"}, headers=provider["headers"])
    stored = db["service_providers"].find_one({"email": provider["email"]})
    assert stored["completed_jobs"] == 1


def test_other_provider_cannot_update(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    other = make_provider()
    booking = _book(client, resident, provider)
    response = client.patch(
        f"/api/service-bookings/{booking['id']}",
        json={"status": "CONFIRMED"},
        headers=other["headers"],
    )
    assert response.status_code == 403


def test_resident_may_only_cancel(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    booking = _book(client, resident, provider)

    response = client.patch(
        f"/api/service-bookings/{booking['id']}",
        json={"status": "COMPLETED"},
        headers=resident["headers"],
    )
    assert response.status_code == 403

    response = client.patch(
        f"/api/service-bookings/{booking['id']}",
        json={"status": "CANCELLED"},
        headers=resident["headers"],
    )
    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "CANCELLED"


def test_review_flow_updates_rating(client, db, make_resident, make_provider):
    alice = make_resident()
    bob = make_resident()
    provider = make_provider()
    first = _book(client, alice, provider)
    second = _book(client, bob, provider)

    review = {"rating": 5, "review": "Excellent and quick work"}
    response = client.post(f"/api/service-bookings/{first['id']}/review", json=review, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Only completed bookings can be reviewed"

    for booking in (first, second):
        client.patch(
            f"/api/service-bookings/{booking['id']}",
            json={"status": "COMPLETED"},
            headers=provider["headers"],
        )

    response = client.post(f"/api/service-bookings/{first['id']}/review", json=review, headers=alice["headers"])
    assert response.status_code == 201
    assert response.json()["review"]["rating"] == 5

    response = client.post(f"/api/service-bookings/{first['id']}/review", json=review, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Booking already reviewed"

    response = client.post(
        f"/api/service-bookings/{second['id']}/review",
        json={"rating": 4, "review": "Good job, a bit late"},
        headers=bob["headers"],
    )
    assert response.status_code == 201

    stored = db["service_providers"].find_one({"email": provider["email"]})
    assert stored["rating"] == 4.5
    assert stored["total_reviews"] == 2


def test_cannot_review_someone_elses_booking(client, make_resident, make_provider):
    alice = make_resident()
    bob = make_resident()
    provider = make_provider()
    booking = _book(client, alice, provider)
    client.patch(f"/api/service-bookings/{booking['id']}", json={"status": "COMPLETED"}, headers=provider["headers"])

    response = client.post(
        f"/api/service-bookings/{booking['id']}/review",
        json={"rating": 1, "review": "Not my booking at all"},
        headers=bob["headers"],
    )
    assert response.status_code == 403


def test_review_rating_bounds(client, make_resident, make_provider):
    resident = make_resident()
    provider = make_provider()
    booking = _book(client, resident, provider)
    response = client.post(
        f"/api/service-bookings/{booking['id']}/review",
        json={"rating": 6, "review": "Way too good to be true"},
        headers=resident["headers"],
    )
    assert response.status_code == 422
