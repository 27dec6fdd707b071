"""Test Projects 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

from tests.conftest import auth_headers


def test_create_project_sets_leader(client, seed_users):
    headers = auth_headers(client, "member@example.com")
    resp = client.post("/api/projects", json={"project_name": "신규 프로젝트"}, headers=headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["leader_id"] == seed_users["member"].user_id

    list_resp = client.get("/api/projects", headers=headers)
    assert [row["project_id"] for row in list_resp.json()] == [data["project_id"]]

    me = client.get("/api/auth/me", headers=headers)
    assert me.json()["is_project_leader"] is True


def test_get_project_requires_leader(client, seed_users, seed_project):
    leader_resp = client.get(f"/api/projects/{seed_project.project_id}", headers=auth_headers(client, "leader@example.com"))
    assert leader_resp.status_code == 200

    member_resp = client.get(f"/api/projects/{seed_project.project_id}", headers=auth_headers(client, "member@example.com"))
    assert member_resp.status_code == 403


def test_get_missing_project(client, seed_users):
    resp = client.get("/api/projects/9999", headers=auth_headers(client, "leader@example.com"))
    assert resp.status_code == 404
