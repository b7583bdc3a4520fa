def _headers(body):
    return {"Authorization": f"Bearer {body['session']['access_token']}"}


def test_artist_updates_own_profile(seeded, register_user, client):
    artist = register_user("artist")

    response = client.put("/api/v1/profiles/artists/me", headers=_headers(artist),
                          json={"bio": "Choreographer, ten years of hip-hop", "experience": 10,
                                "specialization": "hip-hop"})

    assert response.status_code == 200
    assert response.json()["experience"] == 10
    row = seeded.rows("artists")[0]
    assert row["specialization"] == "hip-hop"
    assert any(e["action"] == "profile_updated" for e in seeded.rows("audit_log"))


def test_student_profile_is_created_on_first_update(seeded, register_user, client):
    student = register_user("student")
    headers = _headers(student)

    assert client.get("/api/v1/profiles/students/me", headers=headers).status_code == 404

    created = client.put("/api/v1/profiles/students/me", headers=headers,
                         json={"skill_level": "beginner", "preferred_dance_forms": ["salsa", "bachata"]})
    updated = client.put("/api/v1/profiles/students/me", headers=headers, json={"goals": "Compete next year"})

    assert created.status_code == 200
    assert updated.status_code == 200
    assert len(seeded.rows("students")) == 1
    assert updated.json()["skill_level"] == "beginner"
    assert updated.json()["goals"] == "Compete next year"


def test_studio_owner_completes_listing_and_others_can_find_it(seeded, register_user, client):
    owner = register_user("studio_owner", name="Groove Studio")
    student = register_user("student")

    response = client.put("/api/v1/profiles/studios/me", headers=_headers(owner),
                          json={"address": "12 Hill Road", "city": "Mumbai", "area": "Bandra",
                                "capacity": 30, "price_per_hour": 100000})
    listing = client.get("/api/v1/profiles/studios?city=Mumbai", headers=_headers(student))

    assert response.status_code == 200
    assert listing.status_code == 200
    assert [s["name"] for s in listing.json()] == ["Groove Studio"]


def test_student_cannot_edit_studios(seeded, register_user, client):
    register_user("studio_owner")
    student = register_user("student")

    response = client.put("/api/v1/profiles/studios/me", headers=_headers(student), json={"capacity": 5})

    assert response.status_code == 403


def test_user_updates_own_account_but_not_others(seeded, register_user, client):
    first = register_user("student")
    second = register_user("student")

    own = client.put(f"/api/v1/users/{first['user']['id']}", headers=_headers(first), json={"bio": "Salsa nerd"})
    other = client.put(f"/api/v1/users/{second['user']['id']}", headers=_headers(first), json={"bio": "Hacked"})

    assert own.status_code == 200
    assert own.json()["bio"] == "Salsa nerd"
    assert other.status_code == 403


def test_deactivated_user_cannot_log_in(seeded, register_user, client, admin):
    student = register_user("student", email="gone@example.com")

    deactivated = client.delete(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"])
    login = client.post("/api/v1/auth/login", json={"email": "gone@example.com", "password": "password123"})

    assert deactivated.status_code == 200
    assert deactivated.json()["is_active"] is False
    assert login.status_code == 403


def test_refused_login_runs_no_sign_in_hook_and_drops_session(seeded, register_user, client, admin):
    student = register_user("student", email="idle@example.com")
    client.delete(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"])
    touched_at = next(u for u in seeded.rows("users") if u["id"] == student["user"]["id"])["updated_at"]

    login = client.post("/api/v1/auth/login", json={"email": "idle@example.com", "password": "password123"})

    assert login.status_code == 403
    assert next(u for u in seeded.rows("users") if u["id"] == student["user"]["id"])["updated_at"] == touched_at
    assert seeded.auth.admin.signed_out[-1][1] == "local"
    assert seeded.auth.admin.signed_out[-1][0] not in seeded.auth.tokens


def test_deactivated_user_token_stops_working(seeded, register_user, client, admin):
    student = register_user("student")
    assert client.get("/api/v1/auth/me", headers=_headers(student)).status_code == 200

    client.delete(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"])

    assert client.get("/api/v1/auth/me", headers=_headers(student)).status_code == 403
    bookings = client.get("/api/v1/classes/bookings/me", headers=_headers(student))
    assert bookings.status_code == 403
