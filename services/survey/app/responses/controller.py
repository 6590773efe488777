"""Responses controller: maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import LocationRequiredError
from app.reporting.scoring import RATING_LABELS
from app.responses import service
from app.responses.schemas import (
    AggregateRecordSchema,
    ComparisonData,
    ComparisonPointSchema,
    ComparisonResponse,
    ResponseListResponse,
    ResponseRecord,
    StatsResponse,
    SubmissionListResponse,
    SubmissionRecord,
    SubmitResponsesRequest,
    SubmitResponsesResult,
)
from shared.models.pagination import PageMeta

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception, action: str) -> HTTPException:
    if isinstance(exc, LocationRequiredError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Validation failed",
                "details": [{"field": "location", "message": "Locatie is verplicht"}],
            },
        )
    logger.exception("Failed to %s", action)
    detail: dict = {"error": f"Failed to {action}"}
    if get_settings().expose_error_details:
        detail["details"] = str(exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


async def submit_responses(
    db: AsyncSession,
    body: SubmitResponsesRequest,
    *,
    require_location: bool,
) -> SubmitResponsesResult:
    answers = [
        {
            "question_id": answer.question_id,
            "response_data": answer.response_data.model_dump(exclude_unset=True),
            "user_identifier": answer.user_identifier,
        }
        for answer in body.responses
    ]
    try:
        submission = await service.submit_batch(
            db,
            answers=answers,
            survey_type=body.survey_type,
            location=body.location,
            require_location=require_location,
        )
    except Exception as exc:
        raise _handle_domain_error(exc, "save responses") from exc
    return SubmitResponsesResult(
        message="Responses saved",
        submission_id=submission.submission_id,
    )


async def list_submissions(
    db: AsyncSession,
    *,
    page: int,
    limit: int,
    survey_type: str | None,
    location: str | None,
) -> SubmissionListResponse:
    try:
        items, total = await service.list_submissions(
            db, page=page, limit=limit, survey_type=survey_type, location=location,
        )
    except Exception as exc:
        raise _handle_domain_error(exc, "fetch submissions") from exc
    return SubmissionListResponse(
        data=[SubmissionRecord.model_validate(item) for item in items],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


async def list_responses(
    db: AsyncSession,
    *,
    page: int,
    limit: int,
    question_id: UUID | None,
) -> ResponseListResponse:
    try:
        items, total = await service.list_responses(
            db, page=page, limit=limit, question_id=question_id,
        )
    except Exception as exc:
        raise _handle_domain_error(exc, "fetch responses") from exc
    return ResponseListResponse(
        data=[ResponseRecord.model_validate(item) for item in items],
        pagination=PageMeta.build(page=page, limit=limit, total=total),
    )


async def get_stats(
    db: AsyncSession,
    *,
    location: str | None,
    survey_type: str | None,
) -> StatsResponse:
    try:
        records = await service.get_stats(db, location=location, survey_type=survey_type)
    except Exception as exc:
        raise _handle_domain_error(exc, "generate response stats") from exc
    return StatsResponse(
        data=[AggregateRecordSchema.model_validate(r) for r in records],
        rating_labels=RATING_LABELS,
    )


async def get_comparison(
    db: AsyncSession,
    *,
    location: str,
    survey_type: str,
) -> ComparisonResponse:
    try:
        points = await service.get_comparison(db, location=location, survey_type=survey_type)
    except Exception as exc:
        raise _handle_domain_error(exc, "generate comparison") from exc
    return ComparisonResponse(
        data=ComparisonData(
            survey_type=survey_type,
            location=location,
            points=[ComparisonPointSchema.model_validate(p) for p in points],
        )
    )
