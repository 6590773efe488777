"""Question catalog Pydantic V2 schemas.

Length bounds and character sets mirror what the admin dashboard enforces
client-side, so a form that passes there passes here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints

from app.models.enums import Priority, QuestionStatus, SurveyType
from shared.models.pagination import PageMeta

CATEGORY_PATTERN = r"^[a-zA-Z0-9\s_-]*$"
CREATED_BY_PATTERN = r"^[a-zA-Z0-9\s_.@-]*$"
SEARCH_PATTERN = r"^[a-zA-Z0-9\s_.-]+$"

# Query filters are trimmed before their bounds are checked; an empty value is rejected.
CategoryFilter = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=100, pattern=r"^[a-zA-Z0-9\s_-]+$"),
]
SearchTerm = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=100, pattern=SEARCH_PATTERN),
]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateQuestionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    category: str | None = Field(default=None, max_length=100, pattern=CATEGORY_PATTERN)
    priority: Priority = Priority.MEDIUM
    status: QuestionStatus = QuestionStatus.ACTIVE
    mode: SurveyType = SurveyType.REGULAR
    created_by: str | None = Field(default=None, max_length=100, pattern=CREATED_BY_PATTERN)


class UpdateQuestionRequest(BaseModel):
    """Partial update. The identifier lives in the path and may not be sent in the body."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    category: str | None = Field(default=None, max_length=100, pattern=CATEGORY_PATTERN)
    priority: Priority | None = None
    status: QuestionStatus | None = None
    mode: SurveyType | None = None
    created_by: str | None = Field(default=None, max_length=100, pattern=CREATED_BY_PATTERN)


class ReorderItem(BaseModel):
    question_id: str = Field(validation_alias=AliasChoices("question_id", "uuid"))


class ReorderRequest(BaseModel):
    order: list[ReorderItem] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: UUID
    title: str
    description: str | None = None
    category: str | None = None
    priority: str
    status: str
    # None when the store predates the mode column.
    mode: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class QuestionEnvelope(BaseModel):
    data: QuestionResponse


class QuestionMutationResponse(BaseModel):
    message: str
    data: QuestionResponse


class QuestionListResponse(BaseModel):
    data: list[QuestionResponse]
    pagination: PageMeta


class MessageResponse(BaseModel):
    message: str
