from beanie import PydanticObjectId

from judgepool import crud
from judgepool.config import settings

API = settings.api_v1_str


async def _setup_group(client, admin_headers) -> tuple[str, list[str]]:
    response = await client.post(
        f"{API}/groups",
        json={"name": "API Hackathon", "is_public": False, "judge_password": "let-me-judge"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    group_id = response.json()["id"]
    response = await client.put(
        f"{API}/groups/{group_id}/criteria",
        json={"criteria": [{"question": "Originality?", "order": 0}, {"question": "Execution?", "order": 1}]},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    criteria_ids = [c["id"] for c in response.json()]
    response = await client.post(
        f"{API}/groups/{group_id}/submissions",
        json={"submissions": [{"submission_id": "s1", "title": "First app"}, {"submission_id": "s2", "title": "Two"}]},
        headers=admin_headers,
    )
    assert response.json() == {"added": 2, "skipped": 0, "errors": []}
    return group_id, criteria_ids


async def _register(client, group_id: str, name: str) -> dict[str, str]:
    response = await client.post(
        f"{API}/judges/groups/{group_id}/register", json={"name": name, "password": "let-me-judge"}
    )
    assert response.status_code == 200, response.text
    return {"X-Judge-Session": response.json()["session_token"]}


async def test_admin_endpoints_require_key(client):
    response = await client.get(f"{API}/groups", headers={"X-API-Key": "wrong"})
    assert response.status_code == 403
    response = await client.get(f"{API}/groups")
    assert response.status_code in (401, 403)


async def test_register_with_wrong_password(client, admin_headers):
    group_id, _ = await _setup_group(client, admin_headers)
    response = await client.post(f"{API}/judges/groups/{group_id}/register", json={"name": "ada", "password": "no"})
    assert response.status_code == 403
    assert response.json()["error"] == "InvalidGroupPasswordError"


async def test_expired_session_is_401(client):
    response = await client.get(f"{API}/judges/session", headers={"X-Judge-Session": "not-a-token"})
    assert response.status_code == 401
    assert response.json()["error"] == "SessionExpiredError"


async def test_judging_flow(client, admin_headers):
    group_id, criteria_ids = await _setup_group(client, admin_headers)
    ada = await _register(client, group_id, "Ada")
    grace = await _register(client, group_id, "Grace")

    response = await client.get(f"{API}/judges/session", headers=ada)
    assert response.json()["name"] == "ada"

    response = await client.post(
        f"{API}/submissions/s1/scores", json={"criterion_id": criteria_ids[0], "score": 11}, headers=ada
    )
    assert response.status_code == 422
    response = await client.post(
        f"{API}/submissions/s1/scores", json={"criterion_id": criteria_ids[0], "score": 7}, headers=ada
    )
    assert response.status_code == 200, response.text

    response = await client.post(f"{API}/submissions/s1/complete", headers=ada)
    assert response.status_code == 422
    assert response.json()["error"] == "IncompleteScoringError"

    response = await client.post(
        f"{API}/submissions/s1/scores",
        json={"criterion_id": criteria_ids[1], "score": 9, "comment": "Nice"},
        headers=ada,
    )
    response = await client.post(f"{API}/submissions/s1/complete", headers=ada)
    assert response.status_code == 200
    body = response.json()
    assert (body["state"], body["owner_name"], body["owned_by_me"]) == ("completed", "ada", True)

    response = await client.post(f"{API}/submissions/s1/complete", headers=grace)
    assert response.status_code == 409
    assert response.json()["error"] == "AlreadyOwnedError"
    response = await client.post(f"{API}/submissions/s1/reopen", headers=grace)
    assert response.status_code == 403

    response = await client.get(f"{API}/submissions", headers=grace)
    assert [s["submission_id"] for s in response.json()] == ["s2"]

    response = await client.get(f"{API}/judges/progress", headers=ada)
    assert (response.json()["completed"], response.json()["total"]) == (1, 2)
    response = await client.get(f"{API}/judges/group-progress", headers=grace)
    assert response.json()["percent"] == 50.0

    response = await client.get(f"{API}/submissions/s1/scores", headers=ada)
    assert [(s["score"], s["comment"]) for s in response.json()] == [(7, None), (9, "Nice")]

    response = await client.get(f"{API}/groups/{group_id}/export", headers=admin_headers)
    assert len(response.json()) == 2


async def test_notes_flow(client, admin_headers):
    group_id, _ = await _setup_group(client, admin_headers)
    ada = await _register(client, group_id, "Ada")
    response = await client.post(f"{API}/submissions/s2/notes", json={"content": "@grace look"}, headers=ada)
    assert response.status_code == 201
    note = response.json()
    assert note["mentions"] == ["grace"]

    response = await client.post(
        f"{API}/submissions/s2/notes",
        json={"content": "reply", "reply_to_id": "5eb7cf5a86d9755df3a6c593"},
        headers=ada,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "StaleNoteError"

    response = await client.post(
        f"{API}/submissions/s2/notes", json={"content": "reply", "reply_to_id": note["id"]}, headers=ada
    )
    response = await client.get(f"{API}/submissions/s2/notes", headers=ada)
    threads = response.json()
    assert len(threads) == 1
    assert [r["content"] for r in threads[0]["replies"]] == ["reply"]


async def test_hiding_score_reopens_submission(client, admin_headers):
    group_id, criteria_ids = await _setup_group(client, admin_headers)
    ada = await _register(client, group_id, "Ada")
    for criterion_id in criteria_ids:
        await client.post(f"{API}/submissions/s1/scores", json={"criterion_id": criterion_id, "score": 5}, headers=ada)
    await client.post(f"{API}/submissions/s1/complete", headers=ada)

    response = await client.get(f"{API}/groups/{group_id}/export", headers=admin_headers)
    assert len(response.json()) == 2
    score_ids = [s.id for s in await crud.judge_score.get_by_group(group_id=PydanticObjectId(group_id))]
    response = await client.post(
        f"{API}/scores/{score_ids[0]}/visibility", json={"is_hidden": True}, headers=admin_headers
    )
    assert response.status_code == 200, response.text
    assert response.json()["state"] == "pending"


async def test_results_and_score_deletion(client, admin_headers):
    group_id, criteria_ids = await _setup_group(client, admin_headers)
    ada = await _register(client, group_id, "Ada")
    for criterion_id, score in zip(criteria_ids, (6, 9)):
        await client.post(
            f"{API}/submissions/s1/scores", json={"criterion_id": criterion_id, "score": score}, headers=ada
        )
    await client.post(f"{API}/submissions/s1/complete", headers=ada)

    response = await client.get(f"{API}/groups/{group_id}/results", headers=admin_headers)
    assert response.status_code == 200, response.text
    results = response.json()
    assert [(r["submission_id"], r["total_score"]) for r in results["rankings"]] == [("s1", 15), ("s2", 0)]
    assert [c["average_score"] for c in results["criteria_breakdown"]] == [6.0, 9.0]

    response = await client.get(f"{API}/groups/{group_id}/results/s1", headers=admin_headers)
    assert response.status_code == 200, response.text
    assert [j["judge_name"] for j in response.json()["by_judge"]] == ["ada"]
    response = await client.get(f"{API}/groups/{group_id}/results/s404", headers=admin_headers)
    assert response.status_code == 404

    score_ids = [s.id for s in await crud.judge_score.get_by_group(group_id=PydanticObjectId(group_id))]
    response = await client.delete(f"{API}/scores/{score_ids[0]}", headers=ada)
    assert response.status_code in (401, 403)
    response = await client.delete(f"{API}/scores/{score_ids[0]}", headers=admin_headers)
    assert response.status_code == 200, response.text
    assert (response.json()["state"], response.json()["owner_judge_id"]) == ("pending", None)
    response = await client.delete(f"{API}/scores/{score_ids[0]}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "ScoreNotFoundError"


async def test_update_group_validates_merged_state(client, admin_headers):
    response = await client.post(f"{API}/groups", json={"name": "Open Hackathon"}, headers=admin_headers)
    group_id = response.json()["id"]
    response = await client.patch(f"{API}/groups/{group_id}", json={"is_public": False}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidGroupSettingsError"
    response = await client.patch(
        f"{API}/groups/{group_id}",
        json={"start_date": "2030-01-02T00:00:00Z", "end_date": "2030-01-01T00:00:00Z"},
        headers=admin_headers,
    )
    assert response.status_code == 422
    response = await client.patch(
        f"{API}/groups/{group_id}", json={"is_public": False, "judge_password": "pw"}, headers=admin_headers
    )
    assert response.status_code == 200, response.text
    assert response.json()["is_public"] is False
