import pytest
from uuid import uuid4

from httpx import AsyncClient


async def _create(client: AsyncClient, headers: dict, **fields) -> dict:
    body = {"title": "Satisfaction", **fields}
    resp = await client.post("/api/questions", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_requires_token(async_client: AsyncClient) -> None:
    resp = await async_client.post("/api/questions", json={"title": "X"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Unauthorized"
    assert resp.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_create_rejects_invalid_token(async_client: AsyncClient, make_token) -> None:
    token = make_token("admin@example.com", secret="wrong-secret")
    resp = await async_client.post(
        "/api/questions", json={"title": "X"}, headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid token"


@pytest.mark.asyncio
async def test_create_forbidden_for_non_admin(async_client: AsyncClient, user_headers) -> None:
    resp = await async_client.post("/api/questions", json={"title": "X"}, headers=user_headers)
    assert resp.status_code == 403
    body = resp.json()
    assert body["error"] == "Forbidden"
    assert body["details"] == "Email not in ADMIN_EMAILS on server"


@pytest.mark.asyncio
async def test_admin_email_match_is_case_insensitive(async_client: AsyncClient, make_token) -> None:
    headers = {"Authorization": f"Bearer {make_token('second.admin@example.COM')}"}
    await _create(async_client, headers)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_and_get_question(async_client: AsyncClient, admin_headers) -> None:
    resp = await async_client.post(
        "/api/questions",
        json={"title": "  Satisfaction  ", "category": "algemeen", "created_by": "admin@example.com"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Question created successfully"
    created = body["data"]
    assert created["title"] == "Satisfaction"
    assert created["priority"] == "medium"
    assert created["status"] == "active"
    assert created["mode"] == "regular"

    resp = await async_client.get(f"/api/questions/{created['question_id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["question_id"] == created["question_id"]


@pytest.mark.asyncio
async def test_create_validation_errors(async_client: AsyncClient, admin_headers) -> None:
    resp = await async_client.post(
        "/api/questions",
        json={"title": "", "category": "bad;chars", "priority": "urgent"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    fields = {d["field"] for d in body["details"]}
    assert {"title", "category", "priority"} <= fields
    assert "request_id" in body


@pytest.mark.asyncio
async def test_get_unknown_question_is_404(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"/api/questions/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Question not found"


@pytest.mark.asyncio
async def test_get_malformed_id_is_400(async_client: AsyncClient) -> None:
    resp = await async_client.get("/api/questions/not-a-uuid")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_question(async_client: AsyncClient, admin_headers) -> None:
    created = await _create(async_client, admin_headers, description="Uitleg")
    resp = await async_client.patch(
        f"/api/questions/{created['question_id']}",
        json={"status": "inactive", "description": "", "priority": None},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "inactive"
    assert data["description"] is None
    assert data["priority"] == "medium"


@pytest.mark.asyncio
async def test_update_accepts_put(async_client: AsyncClient, admin_headers) -> None:
    created = await _create(async_client, admin_headers)
    resp = await async_client.put(
        f"/api/questions/{created['question_id']}", json={"title": "Nieuw"}, headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "Nieuw"


@pytest.mark.asyncio
async def test_update_rejects_identifier_in_body(async_client: AsyncClient, admin_headers) -> None:
    created = await _create(async_client, admin_headers)
    resp = await async_client.patch(
        f"/api/questions/{created['question_id']}",
        json={"uuid": str(uuid4()), "title": "Nieuw"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "uuid"


@pytest.mark.asyncio
async def test_update_with_empty_body_is_400(async_client: AsyncClient, admin_headers) -> None:
    created = await _create(async_client, admin_headers)
    resp = await async_client.patch(
        f"/api/questions/{created['question_id']}", json={}, headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "No valid fields to update"


@pytest.mark.asyncio
async def test_update_unknown_question_is_404(async_client: AsyncClient, admin_headers) -> None:
    resp = await async_client.patch(
        f"/api/questions/{uuid4()}", json={"title": "Nieuw"}, headers=admin_headers,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_question(async_client: AsyncClient, admin_headers) -> None:
    created = await _create(async_client, admin_headers)
    resp = await async_client.delete(f"/api/questions/{created['question_id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Question deleted successfully"}

    resp = await async_client.delete(f"/api/questions/{created['question_id']}", headers=admin_headers)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_questions_pagination_block(async_client: AsyncClient, admin_headers) -> None:
    for i in range(3):
        await _create(async_client, admin_headers, title=f"Vraag {i}")

    resp = await async_client.get("/api/questions", params={"page": 1, "limit": 2, "sortBy": "title"})
    assert resp.status_code == 200
    body = resp.json()
    assert [q["title"] for q in body["data"]] == ["Vraag 0", "Vraag 1"]
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }


@pytest.mark.asyncio
async def test_list_default_limit(async_client: AsyncClient) -> None:
    resp = await async_client.get("/api/questions")
    assert resp.json()["pagination"]["limit"] == 20


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"search": "ab"},
        {"search": "drop;table"},
        {"search": "   "},
        {"search": " ab "},
        {"category": ""},
        {"category": "   "},
        {"page": 10**19},
        {"limit": 101},
        {"page": 0},
        {"sortBy": "random"},
        {"sortOrder": "up"},
        {"mode": "family"},
    ],
)
async def test_list_rejects_bad_query(async_client: AsyncClient, params: dict) -> None:
    resp = await async_client.get("/api/questions", params=params)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"


@pytest.mark.asyncio
async def test_list_trims_filters_before_matching(async_client: AsyncClient, admin_headers) -> None:
    await _create(async_client, admin_headers, title="Lekker weer", category="buiten")
    await _create(async_client, admin_headers, title="Binnen spelen", category="binnen")

    resp = await async_client.get("/api/questions", params={"search": "  weer  "})
    assert resp.status_code == 200
    assert [q["title"] for q in resp.json()["data"]] == ["Lekker weer"]

    resp = await async_client.get("/api/questions", params={"category": " binnen "})
    assert resp.status_code == 200
    assert [q["title"] for q in resp.json()["data"]] == ["Binnen spelen"]


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_reorder_acknowledges(async_client: AsyncClient, admin_headers) -> None:
    resp = await async_client.post(
        "/api/questions/reorder",
        json={"order": [{"uuid": str(uuid4())}, {"question_id": str(uuid4())}]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Order accepted"}


@pytest.mark.asyncio
async def test_reorder_rejects_bad_shape(async_client: AsyncClient, admin_headers) -> None:
    resp = await async_client.post(
        "/api/questions/reorder", json={"order": [{"position": 1}]}, headers=admin_headers,
    )
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Stores without the mode column
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_legacy_store_lists_and_creates(legacy_client: AsyncClient, admin_headers) -> None:
    created = await _create(legacy_client, admin_headers, mode="ouder_kind")
    assert created["mode"] is None

    resp = await legacy_client.get("/api/questions", params={"mode": "ouder_kind"})
    assert resp.status_code == 200
    assert resp.json()["data"] == []
    assert resp.json()["pagination"]["total"] == 0

    resp = await legacy_client.get("/api/questions", params={"mode": "regular"})
    assert resp.json()["pagination"]["total"] == 1
