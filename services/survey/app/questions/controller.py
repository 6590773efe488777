"""Questions controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import EmptyUpdateError, QuestionAlreadyExistsError, QuestionNotFoundError
from app.questions import service
from app.questions.schemas import (
    CreateQuestionRequest,
    MessageResponse,
    QuestionEnvelope,
    QuestionListResponse,
    QuestionMutationResponse,
    QuestionResponse,
    ReorderRequest,
    UpdateQuestionRequest,
)
from app.schema_probe import SchemaCapabilities
from shared.models.pagination import PageMeta

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception, action: str) -> HTTPException:
    if isinstance(exc, QuestionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    if isinstance(exc, QuestionAlreadyExistsError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Question with this UUID already exists",
        )
    if isinstance(exc, EmptyUpdateError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception("Failed to %s", action)
    detail: dict = {"error": f"Failed to {action}"}
    if get_settings().expose_error_details:
        detail["details"] = str(exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


async def list_questions(
    db: AsyncSession,
    schema: SchemaCapabilities,
    *,
    page: int,
    limit: int,
    **filters: str | None,
) -> QuestionListResponse:
    try:
        rows, total = await service.list_questions(db, schema, page=page, limit=limit, **filters)
    except Exception as exc:
        raise _handle_domain_error(exc, "fetch questions") from exc
    return QuestionListResponse(
        data=[QuestionResponse.model_validate(row) for row in rows],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


async def get_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    question_id: UUID,
) -> QuestionEnvelope:
    try:
        row = await service.get_question(db, schema, question_id)
    except Exception as exc:
        raise _handle_domain_error(exc, "fetch question") from exc
    return QuestionEnvelope(data=QuestionResponse.model_validate(row))


async def create_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    body: CreateQuestionRequest,
) -> QuestionMutationResponse:
    try:
        row = await service.create_question(db, schema, **body.model_dump())
    except Exception as exc:
        raise _handle_domain_error(exc, "create question") from exc
    return QuestionMutationResponse(
        message="Question created successfully",
        data=QuestionResponse.model_validate(row),
    )


async def update_question(
    db: AsyncSession,
    schema: SchemaCapabilities,
    question_id: UUID,
    body: UpdateQuestionRequest,
) -> QuestionMutationResponse:
    try:
        row = await service.update_question(
            db, schema, question_id, **body.model_dump(exclude_unset=True),
        )
    except Exception as exc:
        raise _handle_domain_error(exc, "update question") from exc
    return QuestionMutationResponse(
        message="Question updated successfully",
        data=QuestionResponse.model_validate(row),
    )


async def delete_question(db: AsyncSession, question_id: UUID) -> MessageResponse:
    try:
        await service.delete_question(db, question_id)
    except Exception as exc:
        raise _handle_domain_error(exc, "delete question") from exc
    return MessageResponse(message="Question deleted successfully")


def reorder_questions(body: ReorderRequest) -> MessageResponse:
    service.reorder_questions([item.question_id for item in body.order])
    return MessageResponse(message="Order accepted")
