"""Questions router: HTTP layer for the question catalog.

Reads are public (the survey frontend needs them); writes require an admin.
Delegates to controller for business logic orchestration.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.database import get_db
from app.dependencies import require_admin
from app.models.enums import Priority, QuestionStatus, SortField, SortOrder, SurveyType
from app.questions import controller
from app.questions.schemas import (
    CategoryFilter,
    CreateQuestionRequest,
    MessageResponse,
    QuestionEnvelope,
    QuestionListResponse,
    QuestionMutationResponse,
    ReorderRequest,
    SearchTerm,
    UpdateQuestionRequest,
)
from app.schema_probe import SchemaCapabilities, get_schema
from shared.models.pagination import MAX_PAGE
from shared.models.user import CurrentUser

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.get(
    "",
    response_model=QuestionListResponse,
    summary="List questions",
    description="Filter by category, status, priority and mode; case-insensitive search "
    "over title and description; sort by created_at, updated_at, title or priority.",
)
async def list_questions(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int | None = Query(None, ge=1, le=100),
    category: CategoryFilter | None = Query(None),
    status_filter: QuestionStatus | None = Query(None, alias="status"),
    priority: Priority | None = Query(None),
    mode: SurveyType | None = Query(None),
    search: SearchTerm | None = Query(None),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
    schema: SchemaCapabilities = Depends(get_schema),
    settings: Settings = Depends(get_settings),
) -> QuestionListResponse:
    return await controller.list_questions(
        db,
        schema,
        page=page,
        limit=limit or settings.questions_default_limit,
        category=category,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        mode=mode.value if mode else None,
        search=search,
        sort_by=sort_by.value,
        sort_order=sort_order.value,
    )


@router.get(
    "/{question_id}",
    response_model=QuestionEnvelope,
    summary="Get question by ID",
)
async def get_question(
    question_id: UUID,
    db: AsyncSession = Depends(get_db),
    schema: SchemaCapabilities = Depends(get_schema),
) -> QuestionEnvelope:
    return await controller.get_question(db, schema, question_id)


@router.post(
    "",
    response_model=QuestionMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a question",
)
async def create_question(
    body: CreateQuestionRequest,
    db: AsyncSession = Depends(get_db),
    schema: SchemaCapabilities = Depends(get_schema),
    _admin: CurrentUser = Depends(require_admin),
) -> QuestionMutationResponse:
    return await controller.create_question(db, schema, body)


@router.post(
    "/reorder",
    response_model=MessageResponse,
    summary="Submit a display order",
    description="Validates the payload shape and acknowledges it. The order is not persisted.",
)
async def reorder_questions(
    body: ReorderRequest,
    _admin: CurrentUser = Depends(require_admin),
) -> MessageResponse:
    return controller.reorder_questions(body)


@router.patch(
    "/{question_id}",
    response_model=QuestionMutationResponse,
    summary="Update a question",
    description="Partial update. Null values are ignored; an empty string clears "
    "description, category or created_by.",
)
@router.put(
    "/{question_id}",
    response_model=QuestionMutationResponse,
    include_in_schema=False,
)
async def update_question(
    question_id: UUID,
    body: UpdateQuestionRequest,
    db: AsyncSession = Depends(get_db),
    schema: SchemaCapabilities = Depends(get_schema),
    _admin: CurrentUser = Depends(require_admin),
) -> QuestionMutationResponse:
    return await controller.update_question(db, schema, question_id, body)


@router.delete(
    "/{question_id}",
    response_model=MessageResponse,
    summary="Delete a question",
    description="Responses already given for the question are kept.",
)
async def delete_question(
    question_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
) -> MessageResponse:
    return await controller.delete_question(db, question_id)
