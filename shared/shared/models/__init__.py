from shared.models.user import CurrentUser
from shared.models.pagination import MAX_PAGE, PageMeta

__all__ = ["CurrentUser", "MAX_PAGE", "PageMeta"]
