"""Question catalog service: CRUD and filtered listing.

Pure business logic, no FastAPI imports.

Every function takes the resolved ``SchemaCapabilities``: when the store
predates the ``questions.mode`` column, the column is left out of every
statement instead of failing the request.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, case, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import EmptyUpdateError, QuestionAlreadyExistsError, QuestionNotFoundError
from app.models.enums import PRIORITY_RANK, Priority, QuestionStatus, SortField, SortOrder, SurveyType
from app.models.question import Question
from app.schema_probe import SchemaCapabilities

logger = logging.getLogger(__name__)

_BASE_COLUMNS = (
    Question.question_id,
    Question.title,
    Question.description,
    Question.category,
    Question.priority,
    Question.status,
    Question.created_by,
    Question.created_at,
    Question.updated_at,
)

# Sending "" for one of these clears it.
_CLEARABLE_FIELDS = frozenset({"description", "category", "created_by"})
_UPDATABLE_FIELDS = frozenset({"title", "priority", "status", "mode"}) | _CLEARABLE_FIELDS


def _columns(schema: SchemaCapabilities) -> tuple:
    if schema.has_question_mode:
        return (*_BASE_COLUMNS, Question.mode)
    return _BASE_COLUMNS


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _sort_expression(sort_by: str) -> ColumnElement:
    if sort_by == SortField.PRIORITY.value:
        return case(PRIORITY_RANK, value=Question.priority, else_=0)
    return {
        SortField.CREATED_AT.value: Question.created_at,
        SortField.UPDATED_AT.value: Question.updated_at,
        SortField.TITLE.value: Question.title,
    }[sort_by]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_questions(
    db: AsyncSession,
    schema: SchemaCapabilities,
    *,
    page: int = 1,
    limit: int = 20,
    category: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    mode: str | None = None,
    search: str | None = None,
    sort_by: str = SortField.CREATED_AT.value,
    sort_order: str = SortOrder.ASC.value,
) -> tuple[list[dict[str, Any]], int]:
    """Return one page of questions and the total matching count."""
    conditions: list[ColumnElement[bool]] = []
    if category is not None:
        conditions.append(Question.category == category)
    if status is not None:
        conditions.append(Question.status == status)
    if priority is not None:
        conditions.append(Question.priority == priority)
    if mode is not None:
        if schema.has_question_mode:
            conditions.append(Question.mode == mode)
        elif mode != SurveyType.REGULAR.value:
            # Legacy stores only ever held regular questions.
            return [], 0
    if search:
        pattern = f"%{_escape_like(search)}%"
        conditions.append(
            Question.title.ilike(pattern, escape="\\")
            | Question.description.ilike(pattern, escape="\\")
        )

    total = await db.scalar(select(func.count()).select_from(Question).where(*conditions)) or 0

    sort_column = _sort_expression(sort_by)
    if sort_order == SortOrder.DESC.value:
        order = (sort_column.desc(), Question.question_id.desc())
    else:
        order = (sort_column.asc(), Question.question_id.asc())

    stmt = (
        select(*_columns(schema))
        .where(*conditions)
        .order_by(*order)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [dict(row._mapping) for row in result], total


async def get_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    question_id: UUID,
) -> dict[str, Any]:
    stmt = select(*_columns(schema)).where(Question.question_id == question_id)
    row = (await db.execute(stmt)).first()
    if row is None:
        raise QuestionNotFoundError(str(question_id))
    return dict(row._mapping)


async def get_titles(db: AsyncSession, question_ids: list[str]) -> dict[str, str]:
    """Batch-resolve titles for a set of question ids. Unknown ids are absent."""
    ids: list[UUID] = []
    for raw in question_ids:
        try:
            ids.append(raw if isinstance(raw, UUID) else UUID(str(raw)))
        except ValueError:
            continue
    if not ids:
        return {}
    stmt = select(Question.question_id, Question.title).where(Question.question_id.in_(ids))
    result = await db.execute(stmt)
    return {str(qid): title for qid, title in result}


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    *,
    title: str,
    description: str | None = None,
    category: str | None = None,
    priority: str = Priority.MEDIUM.value,
    status: str = QuestionStatus.ACTIVE.value,
    mode: str = SurveyType.REGULAR.value,
    created_by: str | None = None,
    question_id: UUID | None = None,
) -> dict[str, Any]:
    now = _now()
    values: dict[str, Any] = {
        "question_id": question_id or uuid.uuid4(),
        "title": title,
        "description": description or None,
        "category": category or None,
        "priority": priority,
        "status": status,
        "created_by": created_by or None,
        "created_at": now,
        "updated_at": now,
    }
    if schema.has_question_mode:
        values["mode"] = mode

    try:
        await db.execute(insert(Question).values(**values))
    except IntegrityError as exc:
        raise QuestionAlreadyExistsError(str(values["question_id"])) from exc

    logger.info("Question %s created", values["question_id"])
    return await get_question(db, schema, values["question_id"])


async def update_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    question_id: UUID,
    **fields: Any,
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in _UPDATABLE_FIELDS or value is None:
            continue
        if key in _CLEARABLE_FIELDS and value == "":
            value = None
        values[key] = value
    if not schema.has_question_mode:
        values.pop("mode", None)
    if not values:
        raise EmptyUpdateError()

    values["updated_at"] = _now()
    stmt = update(Question).where(Question.question_id == question_id).values(**values)
    result = await db.execute(stmt, execution_options={"synchronize_session": False})
    if result.rowcount == 0:
        raise QuestionNotFoundError(str(question_id))
    return await get_question(db, schema, question_id)


async def delete_question(db: AsyncSession, question_id: UUID) -> None:
    stmt = delete(Question).where(Question.question_id == question_id)
    result = await db.execute(stmt, execution_options={"synchronize_session": False})
    if result.rowcount == 0:
        raise QuestionNotFoundError(str(question_id))
    logger.info("Question %s deleted", question_id)


def reorder_questions(question_ids: list[str]) -> int:
    """Accept a display order for the catalog.

    There is no position column yet, so the order is acknowledged and not
    stored.
    """
    logger.debug("Reorder request for %d questions acknowledged", len(question_ids))
    return len(question_ids)
