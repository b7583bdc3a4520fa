def _headers(token):
    return {"Authorization": f"Bearer {token}"}


def test_login_returns_enriched_session(seeded, register_user, client):
    register_user("artist", email="artist@example.com")

    response = client.post("/api/v1/auth/login", json={"email": "artist@example.com", "password": "password123"})

    assert response.status_code == 200
    body = response.json()
    assert body["session"]["token_type"] == "bearer"
    assert "create_class" in body["user"]["permissions"]
    assert body["user"]["artist"]["bio"] == "To be updated"
    assert body["user"]["recent_activity"] == {"class_bookings": 0, "studio_bookings": 0, "gig_applications": 0}


def test_login_with_wrong_password_is_unauthorized(seeded, register_user, client):
    register_user("student", email="s@example.com")

    response = client.post("/api/v1/auth/login", json={"email": "s@example.com", "password": "wrong-password"})

    assert response.status_code == 401


def test_me_requires_valid_token(seeded, client):
    response = client.get("/api/v1/auth/me", headers=_headers("garbage"))

    assert response.status_code == 401


def test_me_returns_profile_roles_and_permissions(seeded, register_user, client):
    body = register_user("student")

    response = client.get("/api/v1/auth/me", headers=_headers(body["session"]["access_token"]))

    assert response.status_code == 200
    me = response.json()
    assert me["id"] == body["user"]["id"]
    assert me["roles"] == ["student"]
    assert "create_class_booking" in me["permissions"]


def test_change_password_checks_current_password(seeded, register_user, client):
    body = register_user("student", email="pw@example.com")
    headers = _headers(body["session"]["access_token"])

    wrong = client.post("/api/v1/auth/password/change", headers=headers,
                        json={"current_password": "not-it", "new_password": "newpassword1"})
    right = client.post("/api/v1/auth/password/change", headers=headers,
                        json={"current_password": "password123", "new_password": "newpassword1"})

    assert wrong.status_code == 401
    assert right.status_code == 200
    assert seeded.auth.accounts["pw@example.com"]["password"] == "newpassword1"


def test_password_reset_request_does_not_reveal_accounts(seeded, client):
    response = client.post("/api/v1/auth/password/reset", json={"email": "nobody@example.com"})

    assert response.status_code == 200
    assert seeded.auth.sent[0][0] == "recovery"


def test_password_reset_confirm(seeded, register_user, client):
    body = register_user("student", email="reset@example.com")
    seeded.auth.otps["recovery-token"] = body["user"]["id"]

    response = client.post("/api/v1/auth/password/reset/confirm",
                           json={"token": "recovery-token", "password": "brandnew123"})
    reused = client.post("/api/v1/auth/password/reset/confirm",
                         json={"token": "recovery-token", "password": "brandnew123"})

    assert response.status_code == 200
    assert seeded.auth.accounts["reset@example.com"]["password"] == "brandnew123"
    assert reused.status_code == 400


def test_verify_email_marks_profile(seeded, register_user, client):
    body = register_user("student")
    seeded.auth.otps["email-token"] = body["user"]["id"]

    response = client.post("/api/v1/auth/verify-email", json={"token": "email-token"})

    assert response.status_code == 200
    profile = next(u for u in seeded.rows("users") if u["id"] == body["user"]["id"])
    assert profile["email_verified"] is True


def test_revoke_all_sessions_signs_out_globally(seeded, register_user, client):
    body = register_user("student")
    token = body["session"]["access_token"]

    response = client.post("/api/v1/auth/sessions/revoke-all", headers=_headers(token))

    assert response.status_code == 200
    assert seeded.auth.admin.signed_out == [(token, "global")]
    assert client.get("/api/v1/auth/me", headers=_headers(token)).status_code == 401
