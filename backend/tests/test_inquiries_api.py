"""
API tests for /api/inquiries.
"""
import pytest


@pytest.fixture
def profile(make_user, make_profile):
    return make_profile(make_user())


def inquiry_body(profile, **extra):
    body = {
        "profile_id": profile.id,
        "user_name": "Ravi Kumar",
        "user_email": "ravi@example.com",
        "user_phone": "9000000001",
        "message": "Interested in this profile, please share details.",
    }
    body.update(extra)
    return body


def test_create_and_read_inquiry(client, make_user, profile, admin, auth):
    member = make_user()
    response = client.post("/api/inquiries", json=inquiry_body(profile), headers=auth(member))
    assert response.status_code == 201, response.text
    inquiry = response.json()["inquiry"]
    assert inquiry["profile_name"] == profile.name
    assert inquiry["status"] == "pending"
    assert inquiry["is_read"] is False

    own = client.get(f"/api/inquiries/{inquiry['id']}", headers=auth(member))
    assert own.status_code == 200
    assert client.get(f"/api/inquiries/{inquiry['id']}", headers=auth(admin)).status_code == 200

    stranger = client.get(f"/api/inquiries/{inquiry['id']}", headers=auth(make_user()))
    assert stranger.status_code == 403

    mine = client.get("/api/inquiries/my", headers=auth(member)).json()
    assert [i["id"] for i in mine["inquiries"]] == [inquiry["id"]]


def test_create_requires_login_and_live_profile(client, make_user, profile, auth):
    assert client.post("/api/inquiries", json=inquiry_body(profile)).status_code == 401

    response = client.post("/api/inquiries", json=inquiry_body(profile, profile_id=9999), headers=auth(make_user()))
    assert response.status_code == 404
    assert response.json()["error_code"] == "profile_not_found"


def test_message_length_is_limited(client, make_user, profile, auth):
    response = client.post("/api/inquiries", json=inquiry_body(profile, message="x" * 1001), headers=auth(make_user()))
    assert response.status_code == 422


def test_admin_workflow(client, make_user, profile, admin, auth):
    member = make_user()
    ids = [
        client.post("/api/inquiries", json=inquiry_body(profile), headers=auth(member)).json()["inquiry"]["id"]
        for _ in range(3)
    ]

    assert client.get("/api/inquiries", headers=auth(member)).status_code == 403
    assert client.get("/api/inquiries", headers=auth(admin)).json()["count"] == 3

    updated = client.put(
        f"/api/inquiries/{ids[0]}",
        json={"status": "contacted", "admin_notes": "Called back", "is_read": True},
        headers=auth(admin),
    )
    assert updated.status_code == 200
    assert updated.json()["inquiry"]["status"] == "contacted"
    assert updated.json()["inquiry"]["admin_notes"] == "Called back"

    assert client.put(f"/api/inquiries/{ids[1]}", json={"status": "done"}, headers=auth(admin)).status_code == 422
    assert client.put(f"/api/inquiries/{ids[1]}", json={"is_read": True}, headers=auth(member)).status_code == 403

    stats = client.get("/api/inquiries/stats/count", headers=auth(admin)).json()
    assert stats == {"total": 3, "pending": 2, "contacted": 1, "completed": 0, "unread": 2}

    filtered = client.get("/api/inquiries", params={"status": "contacted"}, headers=auth(admin)).json()
    assert [i["id"] for i in filtered["inquiries"]] == [ids[0]]

    assert client.delete(f"/api/inquiries/{ids[2]}", headers=auth(admin)).status_code == 200
    missing = client.get(f"/api/inquiries/{ids[2]}", headers=auth(admin))
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "inquiry_not_found"
