from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CurrentUser(BaseModel):
    """Account resolved from an identity-provider access token."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()
