"""Submission and response service: batch submit, admin listings, reporting.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import LocationRequiredError
from app.models.enums import SurveyType
from app.models.response import Response
from app.models.submission import Submission
from app.questions.service import get_titles
from app.reporting.aggregation import (
    AggregateRecord,
    ComparisonPoint,
    ResponseRow,
    aggregate,
    compare,
    question_ids,
    to_records,
)

logger = logging.getLogger(__name__)


def _response_dict(response: Response, titles: dict[str, str]) -> dict[str, Any]:
    return {
        "response_id": response.response_id,
        "submission_id": response.submission_id,
        "question_id": response.question_id,
        "question_title": titles.get(str(response.question_id)),
        "response_data": response.response_data,
        "user_identifier": response.user_identifier,
        "survey_type": response.survey_type,
    }


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


async def submit_batch(
    db: AsyncSession,
    *,
    answers: list[dict[str, Any]],
    survey_type: str = SurveyType.REGULAR.value,
    location: str | None = None,
    require_location: bool = True,
) -> Submission:
    """Store one submission and all of its answers.

    Both inserts run in the caller's transaction; the request session
    commits them together or not at all.
    """
    if require_location and not location:
        raise LocationRequiredError()

    submission = Submission(survey_type=survey_type, location=location)
    db.add(submission)
    await db.flush()

    db.add_all(
        [
            Response(
                submission_id=submission.submission_id,
                question_id=answer["question_id"],
                response_data=answer["response_data"],
                user_identifier=answer.get("user_identifier") or None,
                survey_type=survey_type,
            )
            for answer in answers
        ]
    )
    await db.flush()
    logger.info(
        "Submission %s stored with %d responses (%s, %s)",
        submission.submission_id,
        len(answers),
        survey_type,
        location or "no location",
    )
    return submission


# ---------------------------------------------------------------------------
# Admin listings
# ---------------------------------------------------------------------------


async def list_submissions(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    survey_type: str | None = None,
    location: str | None = None,
) -> tuple[list[dict[str, Any]], int]:
    """Newest submissions first, each with its responses and their question titles."""
    conditions = []
    if survey_type is not None:
        conditions.append(Submission.survey_type == survey_type)
    if location is not None:
        conditions.append(Submission.location == location)

    total = await db.scalar(select(func.count()).select_from(Submission).where(*conditions)) or 0

    stmt = (
        select(Submission)
        .options(selectinload(Submission.responses))
        .where(*conditions)
        .order_by(Submission.created_at.desc(), Submission.submission_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    submissions = list((await db.execute(stmt)).scalars().all())

    ids = {str(r.question_id) for s in submissions for r in s.responses}
    titles = await get_titles(db, sorted(ids))

    items = [
        {
            "submission_id": s.submission_id,
            "survey_type": s.survey_type,
            "location": s.location,
            "created_at": s.created_at,
            "responses": [_response_dict(r, titles) for r in s.responses],
        }
        for s in submissions
    ]
    return items, total


async def list_responses(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    question_id: UUID | None = None,
) -> tuple[list[dict[str, Any]], int]:
    conditions = []
    if question_id is not None:
        conditions.append(Response.question_id == question_id)

    total = await db.scalar(select(func.count()).select_from(Response).where(*conditions)) or 0

    stmt = (
        select(Response)
        .where(*conditions)
        .order_by(Response.response_id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    responses = list((await db.execute(stmt)).scalars().all())
    titles = await get_titles(db, sorted({str(r.question_id) for r in responses}))
    return [_response_dict(r, titles) for r in responses], total


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


async def fetch_response_rows(
    db: AsyncSession,
    *,
    location: str | None = None,
    survey_type: str | None = None,
) -> list[ResponseRow]:
    """Minimal projection of the responses table for aggregation."""
    stmt = select(Response.question_id, Response.survey_type, Response.response_data)
    if location is not None:
        stmt = stmt.join(
            Submission, Submission.submission_id == Response.submission_id,
        ).where(Submission.location == location)
    if survey_type is not None:
        stmt = stmt.where(Response.survey_type == survey_type)

    result = await db.execute(stmt)
    return [
        ResponseRow(
            question_id=str(qid) if qid is not None else None,
            survey_type=st,
            response_data=data,
        )
        for qid, st, data in result
    ]


async def get_stats(
    db: AsyncSession,
    *,
    location: str | None = None,
    survey_type: str | None = None,
) -> list[AggregateRecord]:
    rows = await fetch_response_rows(db, location=location, survey_type=survey_type)
    buckets = aggregate(rows)
    titles = await get_titles(db, question_ids(buckets))
    return to_records(buckets, titles)


async def get_comparison(
    db: AsyncSession,
    *,
    location: str,
    survey_type: str = SurveyType.REGULAR.value,
) -> list[ComparisonPoint]:
    """Global vs. one-location averages per question for one survey type."""
    global_buckets = aggregate(await fetch_response_rows(db, survey_type=survey_type))
    location_buckets = aggregate(
        await fetch_response_rows(db, location=location, survey_type=survey_type)
    )
    titles = await get_titles(db, question_ids(global_buckets, location_buckets))
    return compare(global_buckets, location_buckets, survey_type, titles)
