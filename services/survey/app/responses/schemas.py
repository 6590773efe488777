"""Submission, response and reporting Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.enums import Location, SurveyType
from shared.models.pagination import PageMeta

USER_IDENTIFIER_PATTERN = r"^[a-zA-Z0-9\s_.@-]+$"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ResponsePayload(BaseModel):
    """What the survey frontend sends per answer.

    ``value`` is the smiley key (``groen``, ``rood`` ...), ``label`` its
    display text. Anything else the client adds is stored untouched.
    """

    model_config = ConfigDict(extra="allow")

    value: str | int | float | None = None
    label: str | None = None


class AnswerRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    question_id: UUID = Field(validation_alias=AliasChoices("question_id", "question_uuid"))
    response_data: ResponsePayload
    user_identifier: str | None = Field(
        default=None, max_length=255, pattern=USER_IDENTIFIER_PATTERN,
    )


class SubmitResponsesRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    responses: list[AnswerRequest] = Field(min_length=1)
    survey_type: SurveyType = SurveyType.REGULAR
    location: Location | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SubmitResponsesResult(BaseModel):
    message: str
    submission_id: UUID


class ResponseRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    response_id: UUID
    submission_id: UUID
    question_id: UUID
    question_title: str | None = None
    response_data: dict[str, Any]
    user_identifier: str | None = None
    survey_type: str


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    submission_id: UUID
    survey_type: str
    location: str | None = None
    created_at: datetime
    responses: list[ResponseRecord] = Field(default_factory=list)


class SubmissionListResponse(BaseModel):
    data: list[SubmissionRecord]
    pagination: PageMeta


class ResponseListResponse(BaseModel):
    data: list[ResponseRecord]
    pagination: PageMeta


class AggregateRecordSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: str
    question_title: str
    survey_type: str
    total: int
    counts: dict[str, int]
    weighted_average: float | None = Field(
        description="1–5 score over the smiley ratings; null when nothing rated was answered.",
    )


class StatsResponse(BaseModel):
    data: list[AggregateRecordSchema]
    rating_labels: dict[str, str]


class ComparisonPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: str
    question_title: str
    global_average: float | None
    location_average: float | None
    global_total: int
    location_total: int


class ComparisonData(BaseModel):
    survey_type: str
    location: str
    points: list[ComparisonPointSchema]


class ComparisonResponse(BaseModel):
    data: ComparisonData
