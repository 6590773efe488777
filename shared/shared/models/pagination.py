import math

from pydantic import BaseModel, ConfigDict, Field

# Keeps OFFSET within a 64-bit integer for any allowed limit.
MAX_PAGE = 100_000


class PageMeta(BaseModel):
    """Pagination block returned next to ``data`` on list endpoints.

    Serialized with camelCase keys (``totalPages``, ``hasNext``, ``hasPrev``)
    because that is what the dashboard consumes.
    """

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "PageMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            has_next=page * limit < total,
            has_prev=page > 1,
        )
