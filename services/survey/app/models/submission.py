import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import SurveyType


class Submission(Base):
    """One respondent's complete pass through the question set."""

    __tablename__ = "submissions"

    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    survey_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SurveyType.REGULAR.value
    )
    location: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    responses = relationship(
        "Response",
        back_populates="submission",
        lazy="raise",
        order_by="Response.response_id",
    )

    __table_args__ = (
        Index("ix_submissions_created_at", "created_at"),
        Index("ix_submissions_location", "location"),
    )
