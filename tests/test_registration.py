import pytest

from app.config.permissions_config import DEFAULT_ROLE_PERMISSIONS
from app.modules.auth.provisioning import PLACEHOLDER, ProvisioningUnit


def _active_grants(supabase, user_id):
    roles = {r["id"]: r["name"] for r in supabase.rows("roles")}
    return [roles[g["role_id"]] for g in supabase.rows("user_roles") if g["user_id"] == user_id and g["is_active"]]


@pytest.mark.parametrize("role", ["student", "artist", "studio_owner"])
def test_registration_grants_exactly_one_matching_role(seeded, register_user, role):
    body = register_user(role)

    user_id = body["user"]["id"]
    assert _active_grants(seeded, user_id) == [role]
    assert body["user"]["roles"] == [role]
    assert body["session"]["access_token"]


def test_artist_gets_placeholder_extension_row(seeded, register_user):
    body = register_user("artist")

    artists = seeded.rows("artists")
    assert len(artists) == 1
    assert artists[0]["user_id"] == body["user"]["id"]
    assert artists[0]["bio"] == PLACEHOLDER
    assert artists[0]["specialization"] == PLACEHOLDER
    assert artists[0]["experience"] == 0
    assert body["user"]["user_type"] == "artist"


def test_studio_owner_gets_placeholder_studio(seeded, register_user):
    body = register_user("studio_owner", email="owner@example.com", name="Groove Studio")

    studio = seeded.rows("studios")[0]
    assert studio["user_id"] == body["user"]["id"]
    assert studio["name"] == "Groove Studio"
    assert studio["address"] == studio["city"] == studio["area"] == PLACEHOLDER
    assert studio["capacity"] == 0 and studio["price_per_hour"] == 0
    assert studio["contact_email"] == "owner@example.com"
    assert body["user"]["user_type"] == "studio"


def test_student_gets_no_extension_row(seeded, register_user):
    body = register_user("student")

    assert seeded.rows("artists") == seeded.rows("studios") == seeded.rows("students") == []
    assert body["user"]["user_type"] == "basic"


def test_unknown_role_is_rejected_before_any_write(seeded, client):
    response = client.post("/api/v1/auth/register", json={
        "email": "x@example.com", "password": "password123",
        "name": "Xavier", "phone": "9876543210", "role": "admin",
    })

    assert response.status_code == 422
    assert seeded.rows("users") == []
    assert seeded.auth.accounts == {}


def test_duplicate_email_is_a_conflict(seeded, register_user, client):
    register_user("student", email="dup@example.com")

    response = client.post("/api/v1/auth/register", json={
        "email": "dup@example.com", "password": "password123",
        "name": "Second", "phone": "9876543210", "role": "artist",
    })

    assert response.status_code == 409
    assert len(seeded.rows("users")) == 1
    assert seeded.rows("artists") == []


def test_registration_before_seeding_is_refused(supabase, client):
    response = client.post("/api/v1/auth/register", json={
        "email": "early@example.com", "password": "password123",
        "name": "Early", "phone": "9876543210",
    })

    assert response.status_code == 404
    assert supabase.auth.accounts == {}


def test_failed_extension_insert_rolls_everything_back(seeded, client):
    seeded.fail_on_insert["studios"] = RuntimeError("studios insert timed out")

    response = client.post("/api/v1/auth/register", json={
        "email": "rollback@example.com", "password": "password123",
        "name": "Rolled Back", "phone": "9876543210", "role": "studio_owner",
    })

    assert response.status_code == 500
    assert seeded.rows("users") == []
    assert seeded.rows("user_roles") == []
    assert "rollback@example.com" not in seeded.auth.accounts
    assert len(seeded.auth.admin.deleted) == 1
    assert seeded.rows("audit_log") == []


def test_successful_registration_is_audited(seeded, register_user):
    body = register_user("artist")

    actions = sorted(e["action"] for e in seeded.rows("audit_log"))
    assert actions == ["role_granted", "user_registered"]
    assert all(e["target_user_id"] == body["user"]["id"] for e in seeded.rows("audit_log"))


def test_each_role_resolves_to_exactly_its_default_list(seeded, register_user, client):
    for role in ("student", "artist", "studio_owner"):
        body = register_user(role)
        token = body["session"]["access_token"]

        response = client.get(
            f"/api/v1/users/{body['user']['id']}/permissions",
            headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        permissions = response.json()["permissions"]
        assert len(permissions) == len(set(permissions))
        assert set(permissions) == set(DEFAULT_ROLE_PERMISSIONS[role])
        assert response.json()["roles"] == [role]


def test_provisioning_unit_undoes_in_reverse_and_reraises():
    undone = []

    with pytest.raises(ValueError):
        with ProvisioningUnit("test") as unit:
            unit.on_rollback("first", lambda: undone.append("first"))
            unit.on_rollback("second", lambda: undone.append("second"))
            raise ValueError("boom")

    assert undone == ["second", "first"]
    assert unit.rolled_back


def test_provisioning_unit_keeps_going_when_an_undo_fails():
    undone = []

    def broken():
        raise RuntimeError("undo failed")

    with pytest.raises(ValueError):
        with ProvisioningUnit("test") as unit:
            unit.on_rollback("first", lambda: undone.append("first"))
            unit.on_rollback("second", broken)
            raise ValueError("boom")

    assert undone == ["first"]


def test_provisioning_unit_commit_discards_undo_actions():
    undone = []

    with ProvisioningUnit("test") as unit:
        unit.on_rollback("first", lambda: undone.append("first"))

    assert undone == []
    assert unit.completed_steps == []
    assert not unit.rolled_back
