import pytest
from uuid import UUID, uuid4

from app.exceptions import EmptyUpdateError, QuestionAlreadyExistsError, QuestionNotFoundError
from app.questions.service import (
    create_question,
    delete_question,
    get_question,
    get_titles,
    list_questions,
    update_question,
)
from app.schema_probe import CURRENT_SCHEMA, LEGACY_SCHEMA


async def _seed(db, schema=CURRENT_SCHEMA) -> list[dict]:
    created = []
    for title, priority, mode, category in [
        ("Hoe vond je de dag?", "medium", "regular", "algemeen"),
        ("Was het eten lekker?", "low", "regular", "eten"),
        ("Speelde je samen met papa of mama?", "high", "ouder_kind", "algemeen"),
    ]:
        created.append(
            await create_question(
                db, schema, title=title, priority=priority, mode=mode, category=category,
            )
        )
    return created


@pytest.mark.asyncio
async def test_create_question_applies_defaults(db_session) -> None:
    row = await create_question(db_session, CURRENT_SCHEMA, title="Satisfaction", description="")
    assert isinstance(row["question_id"], UUID)
    assert row["title"] == "Satisfaction"
    assert row["description"] is None
    assert row["priority"] == "medium"
    assert row["status"] == "active"
    assert row["mode"] == "regular"


@pytest.mark.asyncio
async def test_create_with_explicit_id_and_duplicate(db_session) -> None:
    question_id = uuid4()
    row = await create_question(db_session, CURRENT_SCHEMA, title="Consent", question_id=question_id)
    assert row["question_id"] == question_id
    with pytest.raises(QuestionAlreadyExistsError):
        await create_question(db_session, CURRENT_SCHEMA, title="Again", question_id=question_id)


@pytest.mark.asyncio
async def test_get_missing_question_raises(db_session) -> None:
    with pytest.raises(QuestionNotFoundError):
        await get_question(db_session, CURRENT_SCHEMA, uuid4())


@pytest.mark.asyncio
async def test_list_filters_and_totals(db_session) -> None:
    await _seed(db_session)

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, category="algemeen")
    assert total == 2
    assert {r["category"] for r in rows} == {"algemeen"}

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, mode="ouder_kind")
    assert total == 1
    assert rows[0]["mode"] == "ouder_kind"

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, status="archived")
    assert (rows, total) == ([], 0)


@pytest.mark.asyncio
async def test_list_search_is_case_insensitive(db_session) -> None:
    await _seed(db_session)
    await create_question(
        db_session, CURRENT_SCHEMA, title="Buiten spelen", description="Was het WEER lekker?",
    )

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, search="lekker")
    assert total == 2
    rows, total = await list_questions(db_session, CURRENT_SCHEMA, search="weer")
    assert [r["title"] for r in rows] == ["Buiten spelen"]


@pytest.mark.asyncio
async def test_list_search_treats_underscore_literally(db_session) -> None:
    await create_question(db_session, CURRENT_SCHEMA, title="score_1 vraag")
    await create_question(db_session, CURRENT_SCHEMA, title="scoreX1 vraag")

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, search="score_1")
    assert total == 1
    assert rows[0]["title"] == "score_1 vraag"


@pytest.mark.asyncio
async def test_list_sorts_priority_by_rank(db_session) -> None:
    await _seed(db_session)

    rows, _ = await list_questions(db_session, CURRENT_SCHEMA, sort_by="priority", sort_order="ASC")
    assert [r["priority"] for r in rows] == ["low", "medium", "high"]

    rows, _ = await list_questions(db_session, CURRENT_SCHEMA, sort_by="priority", sort_order="DESC")
    assert [r["priority"] for r in rows] == ["high", "medium", "low"]


@pytest.mark.asyncio
async def test_list_paginates(db_session) -> None:
    for i in range(5):
        await create_question(db_session, CURRENT_SCHEMA, title=f"Vraag {i}")

    rows, total = await list_questions(
        db_session, CURRENT_SCHEMA, page=2, limit=2, sort_by="title",
    )
    assert total == 5
    assert [r["title"] for r in rows] == ["Vraag 2", "Vraag 3"]

    rows, total = await list_questions(db_session, CURRENT_SCHEMA, page=3, limit=2, sort_by="title")
    assert [r["title"] for r in rows] == ["Vraag 4"]


@pytest.mark.asyncio
async def test_update_partial_fields(db_session) -> None:
    row = await create_question(
        db_session, CURRENT_SCHEMA, title="Oud", description="Uitleg", category="eten",
    )
    updated = await update_question(
        db_session, CURRENT_SCHEMA, row["question_id"],
        title="Nieuw", description="", category=None, mode="ouder_kind",
    )
    assert updated["title"] == "Nieuw"
    assert updated["description"] is None
    assert updated["category"] == "eten"
    assert updated["mode"] == "ouder_kind"
    assert updated["updated_at"] >= row["updated_at"]


@pytest.mark.asyncio
async def test_update_with_no_effective_fields_raises(db_session) -> None:
    row = await create_question(db_session, CURRENT_SCHEMA, title="Vraag")
    with pytest.raises(EmptyUpdateError):
        await update_question(db_session, CURRENT_SCHEMA, row["question_id"])
    with pytest.raises(EmptyUpdateError):
        await update_question(db_session, CURRENT_SCHEMA, row["question_id"], title=None, status=None)


@pytest.mark.asyncio
async def test_update_missing_question_raises(db_session) -> None:
    with pytest.raises(QuestionNotFoundError):
        await update_question(db_session, CURRENT_SCHEMA, uuid4(), title="Nieuw")


@pytest.mark.asyncio
async def test_delete_question(db_session) -> None:
    row = await create_question(db_session, CURRENT_SCHEMA, title="Weg")
    await delete_question(db_session, row["question_id"])
    with pytest.raises(QuestionNotFoundError):
        await get_question(db_session, CURRENT_SCHEMA, row["question_id"])


@pytest.mark.asyncio
async def test_delete_missing_question_raises(db_session) -> None:
    with pytest.raises(QuestionNotFoundError):
        await delete_question(db_session, uuid4())


@pytest.mark.asyncio
async def test_get_titles_ignores_unknown_and_malformed_ids(db_session) -> None:
    row = await create_question(db_session, CURRENT_SCHEMA, title="Satisfaction")
    titles = await get_titles(db_session, [str(row["question_id"]), str(uuid4()), "not-a-uuid"])
    assert titles == {str(row["question_id"]): "Satisfaction"}


# ---------------------------------------------------------------------------
# Stores without the mode column
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_legacy_probe_detects_missing_mode(legacy_engine) -> None:
    from app.schema_probe import probe_schema

    assert await probe_schema(legacy_engine) == LEGACY_SCHEMA


@pytest.mark.asyncio
async def test_legacy_create_and_get_report_null_mode(legacy_session) -> None:
    row = await create_question(legacy_session, LEGACY_SCHEMA, title="Oud schema", mode="ouder_kind")
    assert "mode" not in row
    fetched = await get_question(legacy_session, LEGACY_SCHEMA, row["question_id"])
    assert fetched["title"] == "Oud schema"


@pytest.mark.asyncio
async def test_legacy_list_with_alternate_mode_is_empty(legacy_session) -> None:
    await create_question(legacy_session, LEGACY_SCHEMA, title="Vraag")

    rows, total = await list_questions(legacy_session, LEGACY_SCHEMA, mode="ouder_kind")
    assert (rows, total) == ([], 0)

    rows, total = await list_questions(legacy_session, LEGACY_SCHEMA, mode="regular")
    assert total == 1


@pytest.mark.asyncio
async def test_legacy_update_of_mode_only_is_empty(legacy_session) -> None:
    row = await create_question(legacy_session, LEGACY_SCHEMA, title="Vraag")
    with pytest.raises(EmptyUpdateError):
        await update_question(legacy_session, LEGACY_SCHEMA, row["question_id"], mode="ouder_kind")
