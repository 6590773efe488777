import logging

from fastapi import Depends, HTTPException, status

from app.config import Settings, get_settings
from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def require_admin(
    user: CurrentUser = Depends(get_current_user_required),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """Allow only identities whose email is on the ADMIN_EMAILS list.

    Authentication itself is the identity provider's job; an empty list
    denies every caller.
    """
    if user.normalized_email not in settings.admin_emails_list:
        if settings.is_development:
            logger.warning("Admin check failed for %s", user.normalized_email or "<no email>")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "Forbidden", "details": "Email not in ADMIN_EMAILS on server"},
        )
    return user
