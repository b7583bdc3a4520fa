def _role_id(supabase, name):
    return next(r["id"] for r in supabase.rows("roles") if r["name"] == name)


def _action_id(supabase, name):
    return next(a["id"] for a in supabase.rows("actions") if a["name"] == name)


def test_admin_grants_role_to_user(seeded, client, admin, user_factory):
    target = user_factory(("student",))
    artist = _role_id(seeded, "artist")

    response = client.post(f"/api/v1/users/{target['id']}/roles", headers=admin["headers"],
                           json={"role_id": artist, "notes": "Promoted"})

    assert response.status_code == 201
    assert response.json()["role_name"] == "artist"
    permissions = client.get(f"/api/v1/users/{target['id']}/permissions", headers=target["headers"]).json()
    assert permissions["roles"] == ["artist", "student"]
    assert "create_class" in permissions["permissions"]


def test_granting_held_role_is_a_conflict(seeded, client, admin, user_factory):
    target = user_factory(("student",))

    response = client.post(f"/api/v1/users/{target['id']}/roles", headers=admin["headers"],
                           json={"role_id": _role_id(seeded, "student")})

    assert response.status_code == 409


def test_grant_to_missing_user_or_role_is_not_found(seeded, client, admin, user_factory):
    target = user_factory(("student",))

    missing_user = client.post("/api/v1/users/no-such-user/roles", headers=admin["headers"],
                               json={"role_id": _role_id(seeded, "artist")})
    missing_role = client.post(f"/api/v1/users/{target['id']}/roles", headers=admin["headers"],
                               json={"role_id": "no-such-role"})

    assert missing_user.status_code == 404
    assert missing_role.status_code == 404


def test_student_cannot_manage_roles(seeded, client, user_factory):
    student = user_factory(("student",))
    other = user_factory(("student",))

    response = client.post(f"/api/v1/users/{other['id']}/roles", headers=student["headers"],
                           json={"role_id": _role_id(seeded, "admin")})

    assert response.status_code == 403
    assert len([g for g in seeded.rows("user_roles") if g["user_id"] == other["id"]]) == 1


def test_revoke_keeps_row_inactive_and_regrant_reactivates(seeded, client, admin, user_factory):
    target = user_factory(("student", "artist"))
    artist = _role_id(seeded, "artist")

    revoked = client.delete(f"/api/v1/users/{target['id']}/roles/{artist}", headers=admin["headers"])

    assert revoked.status_code == 200
    rows = [g for g in seeded.rows("user_roles") if g["user_id"] == target["id"] and g["role_id"] == artist]
    assert len(rows) == 1 and rows[0]["is_active"] is False
    permissions = client.get(f"/api/v1/users/{target['id']}/permissions", headers=target["headers"]).json()
    assert "create_class" not in permissions["permissions"]

    again = client.delete(f"/api/v1/users/{target['id']}/roles/{artist}", headers=admin["headers"])
    assert again.status_code == 404

    regranted = client.post(f"/api/v1/users/{target['id']}/roles", headers=admin["headers"],
                            json={"role_id": artist})
    assert regranted.status_code == 201
    rows = [g for g in seeded.rows("user_roles") if g["user_id"] == target["id"] and g["role_id"] == artist]
    assert len(rows) == 1 and rows[0]["is_active"] is True


def test_list_user_roles_hides_revoked_grants_by_default(seeded, client, admin, user_factory):
    target = user_factory(("student", "artist"))
    client.delete(f"/api/v1/users/{target['id']}/roles/{_role_id(seeded, 'artist')}", headers=admin["headers"])

    active = client.get(f"/api/v1/users/{target['id']}/roles", headers=target["headers"]).json()
    everything = client.get(f"/api/v1/users/{target['id']}/roles?include_inactive=true",
                            headers=target["headers"]).json()

    assert [g["role_name"] for g in active] == ["student"]
    assert len(everything) == 2


def test_reading_another_users_permissions_needs_read_user_roles(seeded, client, admin, user_factory):
    student = user_factory(("student",))
    other = user_factory(("artist",))

    assert client.get(f"/api/v1/users/{other['id']}/permissions", headers=student["headers"]).status_code == 403
    assert client.get(f"/api/v1/users/{other['id']}/permissions", headers=admin["headers"]).status_code == 200


def test_role_action_grant_and_revoke(seeded, client, admin, user_factory):
    student = user_factory(("student",))
    role_id = _role_id(seeded, "student")
    action_id = _action_id(seeded, "create_gig")

    granted = client.post(f"/api/v1/roles/{role_id}/actions", headers=admin["headers"], json={"action_id": action_id})
    duplicate = client.post(f"/api/v1/roles/{role_id}/actions", headers=admin["headers"], json={"action_id": action_id})

    assert granted.status_code == 201
    assert duplicate.status_code == 409
    permissions = client.get(f"/api/v1/users/{student['id']}/permissions", headers=student["headers"]).json()
    assert "create_gig" in permissions["permissions"]

    revoked = client.delete(f"/api/v1/roles/{role_id}/actions/{action_id}", headers=admin["headers"])

    assert revoked.status_code == 200
    assert revoked.json()["is_active"] is False
    permissions = client.get(f"/api/v1/users/{student['id']}/permissions", headers=student["headers"]).json()
    assert "create_gig" not in permissions["permissions"]


def test_role_with_actions_lists_active_grants(seeded, client, admin):
    response = client.get(f"/api/v1/roles/{_role_id(seeded, 'artist')}", headers=admin["headers"])

    assert response.status_code == 200
    names = [a["name"] for a in response.json()["actions"]]
    assert names == sorted(names)
    assert "create_class" in names and "create_studio" not in names


def test_catalog_and_role_creation_reject_duplicates(seeded, client, admin):
    action = {"name": "export_reports", "category": "system", "operation": "read"}

    first = client.post("/api/v1/roles/actions", headers=admin["headers"], json=action)
    second = client.post("/api/v1/roles/actions", headers=admin["headers"], json=action)
    role = client.post("/api/v1/roles", headers=admin["headers"], json={"name": "artist"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert role.status_code == 409


def test_action_name_must_follow_naming_convention(seeded, client, admin):
    for name, operation in (
        ("Export-Reports", "read"),
        ("delete_class_booking_x", "read"),
        ("frobnicate_class", "read"),
        ("frobnicate_class", "frobnicate"),
    ):
        response = client.post("/api/v1/roles/actions", headers=admin["headers"],
                               json={"name": name, "category": "system", "operation": operation})

        assert response.status_code == 422, (name, operation)
    assert not any(a["name"] in ("delete_class_booking_x", "frobnicate_class") for a in seeded.rows("actions"))


def test_action_name_with_multi_word_entity_is_accepted(seeded, client, admin):
    response = client.post("/api/v1/roles/actions", headers=admin["headers"],
                           json={"name": "manage_studio_payouts", "category": "system", "operation": "manage"})

    assert response.status_code == 201
