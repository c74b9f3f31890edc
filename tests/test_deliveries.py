"""
Tests for expected deliveries.
"""

import json

DELIVERY = {
    "rider_name": "Ali Rider",
    "id_number": "42101-2222222-2",
    "id_type": "CNIC",
    "company_name": "FoodExpress",
    "description": "Dinner order",
}


def test_resident_registers_delivery(client, make_resident):
    resident = make_resident()
    response = client.post("/api/deliveries", json=DELIVERY, headers=resident["headers"])
    assert response.status_code == 201
    delivery = response.json()["delivery"]
    assert delivery["status"] == "EXPECTED"
    assert delivery["resident"]["apartment"] == resident["apartment"]

    payload = json.loads(delivery["qr_code"])
    assert payload == {
        "type": "delivery_entry",
        "riderName": "Ali Rider",
        "companyName": "FoodExpress",
        "apartment": resident["apartment"],
        "residentId": resident["id"],
        "residentName": resident["name"],
        "idNumber": "42101-2222222-2",
        "idType": "CNIC",
    }


def test_admin_registers_delivery_for_resident(client, admin, make_resident):
    resident = make_resident()
    assert client.post("/api/deliveries", json=DELIVERY, headers=admin["headers"]).status_code == 400
    response = client.post(
        "/api/deliveries",
        json={**DELIVERY, "resident_id": resident["id"]},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    assert response.json()["delivery"]["resident_id"] == resident["id"]


def test_deliveries_scoped_and_status_updates(client, admin, make_resident):
    alice = make_resident()
    bob = make_resident()
    delivery = client.post("/api/deliveries", json=DELIVERY, headers=alice["headers"]).json()["delivery"]

    assert client.get("/api/deliveries", headers=bob["headers"]).json()["deliveries"] == []
    assert len(client.get("/api/deliveries", headers=admin["headers"]).json()["deliveries"]) == 1

    response = client.patch(
        f"/api/deliveries/{delivery['id']}/status",
        json={"status": "ARRIVED"},
        headers=bob["headers"],
    )
    assert response.status_code == 403

    response = client.patch(
        f"/api/deliveries/{delivery['id']}/status",
        json={"status": "ARRIVED"},
        headers=alice["headers"],
    )
    assert response.status_code == 200
    assert response.json()["delivery"]["status"] == "ARRIVED"

    response = client.patch(
        f"/api/deliveries/{delivery['id']}/status",
        json={"status": "LOST"},
        headers=admin["headers"],
    )
    assert response.status_code == 422


def test_provider_cannot_use_deliveries(client, make_provider):
    provider = make_provider()
    assert client.get("/api/deliveries", headers=provider["headers"]).status_code == 403
