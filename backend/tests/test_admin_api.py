"""
API tests for /api/admin, /api/payment-settings and /health.
"""
import io

from bureau.services.access_ledger import AccessLedger


def test_admin_endpoints_require_admin(client, make_user, auth):
    member = make_user()
    for path in ("/api/admin/users", "/api/admin/stats", "/api/admin/audit/profile/1"):
        assert client.get(path).status_code == 401
        response = client.get(path, headers=auth(member))
        assert response.status_code == 403
        assert response.json()["error_code"] == "admin_only"


def test_list_users_hides_password_hashes(client, make_user, admin, auth):
    make_user()
    users = client.get("/api/admin/users", headers=auth(admin)).json()
    assert len(users) == 2
    assert all("password_hash" not in u for u in users)


def test_delete_user(client, make_user, make_profile, admin, auth):
    member = make_user(email="leaving@example.com")
    profile = make_profile(member)

    own = client.delete(f"/api/admin/users/{admin.id}", headers=auth(admin))
    assert own.status_code == 400
    assert own.json()["error_code"] == "cannot_delete_self"

    assert client.delete(f"/api/admin/users/{member.id}", headers=auth(admin)).status_code == 200
    assert client.get(f"/api/profiles/{profile.id}").status_code == 404
    assert client.get("/api/auth/me", headers=auth(member)).json()["error_code"] == "account_disabled"

    again = client.delete(f"/api/admin/users/{member.id}", headers=auth(admin))
    assert again.status_code == 404
    assert again.json()["error_code"] == "user_not_found"


def test_admin_created_profile(client, admin, auth):
    body = {"name": "Listed By Bureau", "gender": "Male", "age": 30, "location": "Indore", "is_premium": True}
    response = client.post("/api/admin/create-profile", json=body, headers=auth(admin))
    assert response.status_code == 201, response.text
    profile = response.json()["profile"]
    assert profile["created_by_admin"] is True
    assert profile["is_verified"] is True
    assert profile["is_premium"] is True
    assert profile["created_by"] == admin.id


def test_stats(client, db, make_user, make_profile, admin, auth):
    member = make_user()
    profile = make_profile(member, is_premium=True)
    make_profile(admin, created_by_admin=True)
    claim = AccessLedger.submit_claim(db, member, profile.id, "STATSUTR0001", 500, "UPI")
    AccessLedger.decide(db, claim.id, "approved", admin)

    stats = client.get("/api/admin/stats", headers=auth(admin)).json()
    assert stats["total_users"] == 2
    assert stats["total_profiles"] == 2
    assert stats["premium_profiles"] == 1
    assert stats["verified_profiles"] == 2
    assert stats["admin_created_profiles"] == 1
    assert stats["access_requests"] == {"total": 1, "pending": 0, "approved": 1, "rejected": 0}
    assert stats["inquiries"]["total"] == 0


def test_audit_trail_and_verification(client, make_user, make_profile, admin, auth):
    owner = make_user()
    profile = make_profile(owner)
    client.put(f"/api/profiles/{profile.id}", json={"bio": "first"}, headers=auth(owner))
    client.put(f"/api/profiles/{profile.id}", json={"bio": "second"}, headers=auth(admin))

    trail = client.get(f"/api/admin/audit/profile/{profile.id}", headers=auth(admin)).json()
    assert [e["action"] for e in trail] == ["PROFILE_UPDATED", "PROFILE_UPDATED"]
    assert trail[0]["previous_hash"] == ""
    assert trail[1]["previous_hash"] == trail[0]["payload_hash"]

    verify = client.get(f"/api/admin/audit/profile/{profile.id}/verify", headers=auth(admin)).json()
    assert verify == {"valid": True, "total_entries": 2, "broken_at": None}

    missing = client.get("/api/admin/audit/profile/9999", headers=auth(admin))
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "audit_not_found"


def test_payment_settings_defaults(client):
    response = client.get("/api/payment-settings")
    assert response.status_code == 200
    settings = response.json()["settings"]
    assert settings["access_fee"] == 500
    assert settings["upi_id"] == "example@upi"


def test_update_payment_settings(client, make_user, admin, asset_store, auth):
    denied = client.put("/api/payment-settings", data={"access_fee": "750"}, headers=auth(make_user()))
    assert denied.status_code == 403

    response = client.put(
        "/api/payment-settings",
        data={"upi_id": "bureau@okaxis", "access_fee": "750"},
        files={"qr_code": ("qr.png", io.BytesIO(b"qr"), "image/png")},
        headers=auth(admin),
    )
    assert response.status_code == 200, response.text
    settings = response.json()["settings"]
    assert settings["upi_id"] == "bureau@okaxis"
    assert settings["access_fee"] == 750
    assert settings["qr_code_url"].startswith("https://assets.test/qr-codes/")

    assert client.get("/api/payment-settings").json()["settings"] == settings


def test_update_payment_settings_validation(client, admin, auth):
    bad_upi = client.put("/api/payment-settings", data={"upi_id": "not a vpa"}, headers=auth(admin))
    assert bad_upi.status_code == 400
    assert bad_upi.json()["error_code"] == "invalid_upi_id"

    bad_fee = client.put("/api/payment-settings", data={"access_fee": "0"}, headers=auth(admin))
    assert bad_fee.status_code == 400
    assert bad_fee.json()["error_code"] == "invalid_amount"


def test_health(client):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["asset_store"] == "unconfigured"
