"""Low-stock and expiry alerts, and the dashboard summaries."""
from datetime import date, timedelta


def _adjust(client, headers, path, quantity, reason):
    return client.patch(f"{path}/quantity", json={"quantity": quantity, "type": reason}, headers=headers)


def test_alerts_follow_low_stock_transitions(client, auth_headers):
    created = client.post(
        "/stock-seeds",
        json={"name": "Chickpea", "quantity": 60, "crop_type": "legume"},
        headers=auth_headers,
    )
    seeds_id = created.json()["id"]

    # 60 -> 45, under the default alert of 50
    _adjust(client, auth_headers, f"/stock-seeds/{seeds_id}", 15, "remove")
    # 45 -> 0
    _adjust(client, auth_headers, f"/stock-seeds/{seeds_id}", 45, "expired")

    response = client.get("/notifications", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    newest, oldest = body["notifications"]
    assert newest["priority"] == "high"
    assert oldest["priority"] == "medium"
    assert newest["item_kind"] == "seeds"
    assert newest["item_id"] == seeds_id
    assert newest["title"] == "Low Stock Alert - Chickpea"


def test_creating_low_item_raises_alert(client, auth_headers):
    client.post(
        "/stock-tools",
        json={"name": "Hoe", "quantity": 1, "category": "hand_tools"},
        headers=auth_headers,
    )

    assert client.get("/notifications/unread-count", headers=auth_headers).json() == {"count": 1}


def test_mark_read_and_read_all(client, auth_headers):
    for name in ("Hoe", "Rake", "Sickle"):
        client.post(
            "/stock-tools",
            json={"name": name, "quantity": 0, "category": "hand_tools"},
            headers=auth_headers,
        )

    notifications = client.get("/notifications", headers=auth_headers).json()["notifications"]
    marked = client.patch(f"/notifications/{notifications[0]['id']}/read", headers=auth_headers)

    assert marked.status_code == 200
    assert marked.json()["status"] == "read"
    assert marked.json()["read_at"] is not None
    assert client.get("/notifications/unread-count", headers=auth_headers).json()["count"] == 2

    pending = client.get("/notifications", params={"status": "pending"}, headers=auth_headers)
    assert pending.json()["total"] == 2

    read_all = client.patch("/notifications/read-all", headers=auth_headers)
    assert read_all.json()["updated"] == 2
    assert client.get("/notifications/unread-count", headers=auth_headers).json()["count"] == 0


def test_cannot_read_other_users_notification(client, auth_headers, other_auth_headers):
    client.post(
        "/stock-tools",
        json={"name": "Hoe", "quantity": 0, "category": "hand_tools"},
        headers=other_auth_headers,
    )
    foreign = client.get("/notifications", headers=other_auth_headers).json()["notifications"][0]

    response = client.patch(f"/notifications/{foreign['id']}/read", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Notification not found"}


def test_dashboard_groups_low_stock_by_kind(client, user, auth_headers, make_stock, make_tool):
    make_stock(user, quantity=5, name="Fava beans", low_stock_threshold=10)
    make_stock(user, quantity=50, name="Barley", low_stock_threshold=10)
    make_tool(user, quantity=1, name="Shovel")

    response = client.get("/dashboard/low-stock", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total_low_stock"] == 2

    by_kind = {entry["kind"]: entry for entry in body["kinds"]}
    assert set(by_kind) == {"stock", "feed", "seeds", "fertilizer", "equipment", "harvest", "tools"}
    assert by_kind["stock"]["total_items"] == 2
    assert by_kind["stock"]["low_stock_items"] == 1
    assert by_kind["stock"]["items"][0] == {
        "id": by_kind["stock"]["items"][0]["id"],
        "name": "Fava beans",
        "quantity": 5,
        "unit": "kg",
        "threshold": 10,
    }
    assert by_kind["tools"]["items"][0]["name"] == "Shovel"
    assert by_kind["feed"]["total_items"] == 0


def test_get_and_delete_notification(client, auth_headers, other_auth_headers):
    client.post(
        "/stock-tools",
        json={"name": "Hoe", "quantity": 0, "category": "hand_tools"},
        headers=auth_headers,
    )
    notification_id = client.get("/notifications", headers=auth_headers).json()["notifications"][0]["id"]

    fetched = client.get(f"/notifications/{notification_id}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Low Stock Alert - Hoe"

    assert client.get(f"/notifications/{notification_id}", headers=other_auth_headers).status_code == 404
    assert client.delete(f"/notifications/{notification_id}", headers=other_auth_headers).status_code == 404

    deleted = client.delete(f"/notifications/{notification_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Notification deleted successfully"}
    assert client.get(f"/notifications/{notification_id}", headers=auth_headers).status_code == 404


def test_expiry_check_alerts_once_per_item(client, user, auth_headers, make_stock):
    today = date.today()
    soon = make_stock(user, quantity=40, name="Barley", expiry_date=today + timedelta(days=10))
    make_stock(user, quantity=40, name="Oats", expiry_date=today + timedelta(days=45))
    make_stock(user, quantity=40, name="Rye", expiry_date=today - timedelta(days=1))
    make_stock(user, quantity=40, name="Millet")

    first = client.post("/notifications/check-expiry", headers=auth_headers)

    assert first.status_code == 200
    assert first.json()["created"] == 1
    alert = first.json()["notifications"][0]
    assert alert["type"] == "expiry"
    assert alert["priority"] == "high"
    assert alert["item_kind"] == "stock"
    assert alert["item_id"] == soon.id
    assert alert["title"] == "Expiry Alert - Barley"
    assert alert["message"] == f"Stock Barley expires in 10 days ({(today + timedelta(days=10)).isoformat()})"

    second = client.post("/notifications/check-expiry", headers=auth_headers)
    assert second.json() == {"created": 0, "notifications": []}

    wider = client.post("/notifications/check-expiry", params={"days": 60}, headers=auth_headers)
    assert [n["title"] for n in wider.json()["notifications"]] == ["Expiry Alert - Oats"]


def test_expiring_items_soonest_first(client, user, auth_headers, make_stock):
    today = date.today()
    client.post(
        "/stock-feed",
        json={
            "name": "Layer mash",
            "quantity": 500,
            "animal_type": "poultry",
            "expiry_date": (today + timedelta(days=3)).isoformat(),
        },
        headers=auth_headers,
    )
    make_stock(user, quantity=40, name="Barley", expiry_date=today + timedelta(days=20))

    response = client.get("/dashboard/expiring", headers=auth_headers)

    assert response.status_code == 200
    assert [(item["kind"], item["name"], item["days_left"]) for item in response.json()] == [
        ("feed", "Layer mash", 3),
        ("stock", "Barley", 20),
    ]


def test_dashboard_summary_totals(client, user, auth_headers, make_stock, make_tool):
    today = date.today()
    make_stock(user, quantity=5, name="Fava beans", price=2, low_stock_threshold=10)
    make_stock(user, quantity=50, name="Barley", expiry_date=today - timedelta(days=2))
    make_tool(user, quantity=1, name="Shovel")
    client.post(
        "/stock-feed",
        json={
            "name": "Layer mash",
            "quantity": 100,
            "animal_type": "poultry",
            "price": 3,
            "expiry_date": (today + timedelta(days=5)).isoformat(),
        },
        headers=auth_headers,
    )

    response = client.get("/dashboard/summary", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    by_kind = {entry["kind"]: entry for entry in body["kinds"]}

    assert by_kind["stock"] == {
        "kind": "stock",
        "total_items": 2,
        "total_quantity": 55,
        "total_value": 10,
        "low_stock": 1,
        "expiring": 1,
    }
    assert by_kind["feed"]["total_value"] == 300
    assert by_kind["feed"]["low_stock"] == 1
    assert by_kind["feed"]["expiring"] == 1
    assert by_kind["tools"]["total_value"] == 0
    assert by_kind["tools"]["low_stock"] == 1
    assert by_kind["equipment"]["total_items"] == 0

    assert body["expiry_window_days"] == 30
    assert body["totals"] == {
        "total_items": 4,
        "total_value": 310,
        "low_stock": 3,
        "expiring": 2,
    }
