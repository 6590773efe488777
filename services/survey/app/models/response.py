import uuid

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base, JSONDocument

from .enums import SurveyType


class Response(Base):
    """One answer to one question, always owned by a submission."""

    __tablename__ = "responses"

    response_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("submissions.submission_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Not a FK: answers outlive the question they were given for.
    question_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    response_data: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    user_identifier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Copy of submissions.survey_type so stats need no join.
    survey_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SurveyType.REGULAR.value
    )

    submission = relationship("Submission", back_populates="responses", lazy="raise")

    __table_args__ = (
        Index("ix_responses_submission_id", "submission_id"),
        Index("ix_responses_question_id", "question_id"),
        Index("ix_responses_survey_type", "survey_type"),
    )
