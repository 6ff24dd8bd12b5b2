import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from app.core.config import settings


def require_admin(x_admin_secret: Optional[str] = Header(None)) -> None:
    """Gate for /admin routes: the caller must present the shared admin secret."""
    if not x_admin_secret or not secrets.compare_digest(x_admin_secret, settings.ADMIN_SECRET_KEY):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret",
        )
