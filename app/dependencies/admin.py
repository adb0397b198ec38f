from fastapi import Depends, HTTPException, status
from app.models.user import User
from app.utils.token import get_current_user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Guard for every /admin router; the role comes from the DB row, not the token."""
    if "admin" not in current_user.roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
