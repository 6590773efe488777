"""Responses router: survey submission, admin listings and reporting.

Submitting is open to respondents; everything else is admin-only.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.database import get_db
from app.dependencies import require_admin
from app.models.enums import Location, SurveyType
from app.responses import controller
from app.responses.schemas import (
    ComparisonResponse,
    ResponseListResponse,
    StatsResponse,
    SubmissionListResponse,
    SubmitResponsesRequest,
    SubmitResponsesResult,
)
from shared.models.pagination import MAX_PAGE
from shared.models.user import CurrentUser

router = APIRouter(prefix="/responses", tags=["Responses"])
submissions_router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post(
    "",
    response_model=SubmitResponsesResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a completed survey",
    description="Creates one submission and one response per answer in a single transaction.",
)
async def submit_responses(
    body: SubmitResponsesRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SubmitResponsesResult:
    return await controller.submit_responses(
        db, body, require_location=settings.require_location,
    )


@router.get(
    "",
    response_model=ResponseListResponse,
    summary="List individual responses",
)
async def list_responses(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(20, ge=1, le=100),
    question_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
) -> ResponseListResponse:
    return await controller.list_responses(db, page=page, limit=limit, question_id=question_id)


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Answer counts and scores per question",
    description="One record per question and survey type, optionally limited to one location.",
)
async def get_stats(
    location: Location | None = Query(None),
    survey_type: SurveyType | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
) -> StatsResponse:
    return await controller.get_stats(
        db,
        location=location.value if location else None,
        survey_type=survey_type.value if survey_type else None,
    )


@router.get(
    "/stats/compare",
    response_model=ComparisonResponse,
    summary="Compare one location against all locations",
)
async def get_comparison(
    location: Location = Query(...),
    survey_type: SurveyType = Query(SurveyType.REGULAR),
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
) -> ComparisonResponse:
    return await controller.get_comparison(
        db, location=location.value, survey_type=survey_type.value,
    )


@submissions_router.get(
    "",
    response_model=SubmissionListResponse,
    summary="List submissions with their responses",
)
async def list_submissions(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(20, ge=1, le=100),
    survey_type: SurveyType | None = Query(None),
    location: Location | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
) -> SubmissionListResponse:
    return await controller.list_submissions(
        db,
        page=page,
        limit=limit,
        survey_type=survey_type.value if survey_type else None,
        location=location.value if location else None,
    )
