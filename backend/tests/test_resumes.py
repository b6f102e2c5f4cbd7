"""Tests for /api/resumes: reference validation and read-time expansion"""
import pytest

PERSONAL_INFO = {
    "full_name": "Test User",
    "professional_title": "Backend Engineer",
    "email": "test@example.com",
    "phone_number": "+14155550100",
    "location": "Berlin",
}


def _create(client, headers, path, payload):
    r = client.post(path, json=payload, headers=headers)
    assert r.status_code == 201, r.json()
    return r.json()["data"]["id"]


@pytest.fixture
def blocks(client, auth_headers):
    """Personal information and two skills owned by the test user."""
    return {
        "personal_information_id": _create(client, auth_headers, "/api/personal-information", PERSONAL_INFO),
        "skill_ids": [
            _create(client, auth_headers, "/api/skills", {"name": "Python", "level": 5}),
            _create(client, auth_headers, "/api/skills", {"name": "SQL", "level": 4}),
        ],
    }


def test_create_and_expand_resume(client, auth_headers, blocks):
    payload = {
        "title": "Backend resume",
        "personal_information_id": blocks["personal_information_id"],
        "skill_ids": list(reversed(blocks["skill_ids"])),
    }
    r = client.post("/api/resumes", json=payload, headers=auth_headers)
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["skill_ids"] == list(reversed(blocks["skill_ids"]))
    assert created["project_ids"] == []

    r = client.get(f"/api/resumes/{created['id']}", headers=auth_headers)
    assert r.status_code == 200
    expanded = r.json()["data"]
    assert expanded["personal_information"]["full_name"] == "Test User"
    # reference order is kept, not the skills' own name ordering
    assert [s["name"] for s in expanded["skills"]] == ["SQL", "Python"]
    assert expanded["projects"] == []
    assert expanded["professional_summaries"] == []


def test_default_title(client, auth_headers, blocks):
    r = client.post(
        "/api/resumes",
        json={"personal_information_id": blocks["personal_information_id"]},
        headers=auth_headers,
    )
    assert r.status_code == 201
    assert r.json()["data"]["title"] == "Default Resume"


def test_duplicate_ids_collapse(client, auth_headers, blocks):
    first = blocks["skill_ids"][0]
    payload = {"personal_information_id": blocks["personal_information_id"], "skill_ids": [first, first]}
    r = client.post("/api/resumes", json=payload, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["data"]["skill_ids"] == [first]


def test_summary_ids_alias(client, auth_headers, blocks):
    summary_id = _create(
        client,
        auth_headers,
        "/api/professional-summaries",
        {"summary": "Backend engineer focused on data-heavy APIs and the systems behind them."},
    )
    payload = {"personal_information_id": blocks["personal_information_id"], "summary_ids": [summary_id]}
    r = client.post("/api/resumes", json=payload, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["data"]["professional_summary_ids"] == [summary_id]


def test_reference_to_other_users_skill(client, auth_headers, other_headers, blocks):
    foreign_skill = _create(client, other_headers, "/api/skills", {"name": "Haskell"})
    payload = {
        "personal_information_id": blocks["personal_information_id"],
        "skill_ids": [blocks["skill_ids"][0], foreign_skill],
    }
    r = client.post("/api/resumes", json=payload, headers=auth_headers)
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "One or more skills do not exist or do not belong to you"
    assert body["errors"] == ["skill_ids"]


def test_reference_to_other_users_personal_information(client, auth_headers, other_headers):
    foreign_pi = _create(client, other_headers, "/api/personal-information", PERSONAL_INFO)
    r = client.post("/api/resumes", json={"personal_information_id": foreign_pi}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Personal information not found or does not belong to you"


def test_reference_to_deleted_skill_rejected_on_write(client, auth_headers, blocks):
    skill_id = blocks["skill_ids"][0]
    client.delete(f"/api/skills/{skill_id}", headers=auth_headers)
    payload = {"personal_information_id": blocks["personal_information_id"], "skill_ids": [skill_id]}
    assert client.post("/api/resumes", json=payload, headers=auth_headers).status_code == 400


def test_deleted_skill_drops_out_of_expansion(client, auth_headers, blocks):
    payload = {"personal_information_id": blocks["personal_information_id"], "skill_ids": blocks["skill_ids"]}
    resume_id = client.post("/api/resumes", json=payload, headers=auth_headers).json()["data"]["id"]

    client.delete(f"/api/skills/{blocks['skill_ids'][0]}", headers=auth_headers)

    expanded = client.get(f"/api/resumes/{resume_id}", headers=auth_headers).json()["data"]
    assert [s["name"] for s in expanded["skills"]] == ["SQL"]
    # the stored reference list itself is untouched
    assert expanded["skill_ids"] == blocks["skill_ids"]


def test_deleted_personal_information_expands_to_null(client, auth_headers, blocks):
    payload = {"personal_information_id": blocks["personal_information_id"]}
    resume_id = client.post("/api/resumes", json=payload, headers=auth_headers).json()["data"]["id"]
    client.delete("/api/personal-information", headers=auth_headers)

    expanded = client.get(f"/api/resumes/{resume_id}", headers=auth_headers).json()["data"]
    assert expanded["personal_information"] is None


def test_list_resumes_newest_first(client, auth_headers, blocks):
    pi = blocks["personal_information_id"]
    client.post("/api/resumes", json={"title": "First", "personal_information_id": pi}, headers=auth_headers)
    client.post("/api/resumes", json={"title": "Second", "personal_information_id": pi}, headers=auth_headers)
    titles = [r["title"] for r in client.get("/api/resumes", headers=auth_headers).json()["data"]]
    assert titles == ["Second", "First"]


def test_update_resume(client, auth_headers, blocks):
    pi = blocks["personal_information_id"]
    resume_id = client.post("/api/resumes", json={"personal_information_id": pi}, headers=auth_headers).json()["data"]["id"]

    r = client.put(
        f"/api/resumes/{resume_id}",
        json={"title": "Renamed", "skill_ids": blocks["skill_ids"][:1]},
        headers=auth_headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["title"] == "Renamed"
    assert data["skill_ids"] == blocks["skill_ids"][:1]


def test_update_resume_rejects_foreign_reference(client, auth_headers, other_headers, blocks):
    pi = blocks["personal_information_id"]
    resume_id = client.post("/api/resumes", json={"personal_information_id": pi}, headers=auth_headers).json()["data"]["id"]
    foreign_skill = _create(client, other_headers, "/api/skills", {"name": "Haskell"})

    r = client.put(f"/api/resumes/{resume_id}", json={"skill_ids": [foreign_skill]}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["errors"] == ["skill_ids"]


def test_update_resume_with_no_fields(client, auth_headers, blocks):
    pi = blocks["personal_information_id"]
    resume_id = client.post("/api/resumes", json={"personal_information_id": pi}, headers=auth_headers).json()["data"]["id"]
    r = client.put(f"/api/resumes/{resume_id}", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "No valid fields to update"


def test_other_users_resume_is_not_found(client, auth_headers, other_headers, blocks):
    pi = blocks["personal_information_id"]
    resume_id = client.post("/api/resumes", json={"personal_information_id": pi}, headers=auth_headers).json()["data"]["id"]

    assert client.get(f"/api/resumes/{resume_id}", headers=other_headers).status_code == 404
    assert client.put(f"/api/resumes/{resume_id}", json={"title": "Mine now"}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/resumes/{resume_id}", headers=other_headers).status_code == 404


def test_delete_resume(client, auth_headers, blocks):
    pi = blocks["personal_information_id"]
    resume_id = client.post("/api/resumes", json={"personal_information_id": pi}, headers=auth_headers).json()["data"]["id"]

    r = client.delete(f"/api/resumes/{resume_id}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Resume deleted successfully"
    assert client.get(f"/api/resumes/{resume_id}", headers=auth_headers).status_code == 404
    assert client.delete(f"/api/resumes/{resume_id}", headers=auth_headers).status_code == 404
