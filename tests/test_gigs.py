import pytest


def _headers(body):
    return {"Authorization": f"Bearer {body['session']['access_token']}"}


@pytest.fixture
def gig(seeded, register_user, client):
    host = register_user("artist")
    response = client.post("/api/v1/gigs", headers=_headers(host), json={
        "title": "Wedding sangeet troupe",
        "description": "Two Bollywood numbers for a sangeet night",
        "requirements": "Two years of stage experience",
        "location": "Taj Lands End",
        "city": "Mumbai",
        "date": "2026-12-05",
        "payment": 1500000,
        "spots": 1,
        "dance_form": "bollywood",
    })
    assert response.status_code == 201, response.text
    return {"host": host, **response.json()}


def test_new_gig_is_open(gig):
    assert gig["status"] == "open"
    assert gig["filled_spots"] == 0


def test_student_cannot_host_gigs(seeded, register_user, client):
    student = register_user("student")

    response = client.post("/api/v1/gigs", headers=_headers(student), json={
        "title": "Flash mob", "description": "Mall flash mob", "requirements": "None",
        "location": "Phoenix Mall", "city": "Pune", "date": "2026-12-10", "spots": 10,
    })

    assert response.status_code == 403


def test_apply_once_then_host_accepts_and_gig_fills(gig, register_user, client):
    applicant = register_user("student")
    latecomer = register_user("student")
    path = f"/api/v1/gigs/{gig['id']}/applications"

    applied = client.post(path, headers=_headers(applicant), json={"message": "Trained in kathak and bollywood"})
    duplicate = client.post(path, headers=_headers(applicant), json={})

    assert applied.status_code == 201
    assert applied.json()["status"] == "applied"
    assert duplicate.status_code == 409

    accepted = client.put(f"{path}/{applied.json()['id']}", headers=_headers(gig["host"]),
                          json={"status": "accepted", "review_notes": "See you at rehearsal"})

    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    filled = client.get(f"/api/v1/gigs/{gig['id']}", headers=_headers(applicant)).json()
    assert filled["status"] == "filled"
    assert filled["filled_spots"] == 1
    assert client.post(path, headers=_headers(latecomer), json={}).status_code == 409


def test_host_sees_all_applications_applicants_only_their_own(gig, register_user, client):
    first = register_user("student")
    second = register_user("student")
    path = f"/api/v1/gigs/{gig['id']}/applications"
    client.post(path, headers=_headers(first), json={})
    client.post(path, headers=_headers(second), json={})

    assert len(client.get(path, headers=_headers(first)).json()) == 1
    assert len(client.get(path, headers=_headers(gig["host"])).json()) == 2


def test_only_host_reviews_applications(gig, register_user, client):
    applicant = register_user("student")
    other_artist = register_user("artist")
    path = f"/api/v1/gigs/{gig['id']}/applications"
    application = client.post(path, headers=_headers(applicant), json={}).json()

    by_applicant = client.put(f"{path}/{application['id']}", headers=_headers(applicant),
                              json={"status": "accepted"})
    by_other_artist = client.put(f"{path}/{application['id']}", headers=_headers(other_artist),
                                 json={"status": "accepted"})
    rejected = client.put(f"{path}/{application['id']}", headers=_headers(gig["host"]),
                          json={"status": "rejected"})
    again = client.put(f"{path}/{application['id']}", headers=_headers(gig["host"]),
                       json={"status": "accepted"})

    assert by_applicant.status_code == 403
    assert by_other_artist.status_code == 403
    assert rejected.status_code == 200
    assert again.status_code == 409


def test_withdraw_only_before_review(gig, register_user, client, seeded):
    first = register_user("student")
    second = register_user("student")
    path = f"/api/v1/gigs/{gig['id']}/applications"
    pending = client.post(path, headers=_headers(first), json={}).json()
    reviewed = client.post(path, headers=_headers(second), json={}).json()
    client.put(f"{path}/{reviewed['id']}", headers=_headers(gig["host"]), json={"status": "rejected"})

    withdrawn = client.delete(f"/api/v1/gigs/applications/{pending['id']}", headers=_headers(first))
    blocked = client.delete(f"/api/v1/gigs/applications/{reviewed['id']}", headers=_headers(second))

    assert withdrawn.status_code == 204
    assert blocked.status_code == 409
    assert [a["id"] for a in seeded.rows("gig_applications")] == [reviewed["id"]]


def test_cancelled_gig_rejects_applications(gig, register_user, client):
    applicant = register_user("student")

    cancelled = client.delete(f"/api/v1/gigs/{gig['id']}", headers=_headers(gig["host"]))
    response = client.post(f"/api/v1/gigs/{gig['id']}/applications", headers=_headers(applicant), json={})

    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert response.status_code == 409


def test_host_can_add_spots_to_filled_gig(gig, register_user, client):
    applicant = register_user("student")
    path = f"/api/v1/gigs/{gig['id']}/applications"
    application = client.post(path, headers=_headers(applicant), json={}).json()
    client.put(f"{path}/{application['id']}", headers=_headers(gig["host"]), json={"status": "accepted"})

    raised = client.put(f"/api/v1/gigs/{gig['id']}", headers=_headers(gig["host"]), json={"spots": 3})

    assert raised.status_code == 200
    assert raised.json()["spots"] == 3
