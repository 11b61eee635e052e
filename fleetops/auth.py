import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .models import User, UserRole
from .permissions import PERMISSION_NAMES, has_permission
from .security_utils import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from a FleetOps access token"""

    if not credentials:
        logger.error("❌ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials

    # Basic token format validation before decoding
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(status_code=401, detail="Invalid token format. Expected a valid JWT token.")

    payload = verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=401,
            detail="Token is invalid or has expired. Please log in again.",
            headers={"X-Token-Expired": "true"},
        )

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = (
        db.query(User)
        .options(joinedload(User.user_roles).joinedload(UserRole.role))
        .filter(User.id == int(user_id))
        .first()
    )
    if not user:
        logger.warning(f"⚠️ Token for unknown user id {user_id}")
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    return user


def get_user_roles(user: User) -> list[str]:
    return user.role_names


def require_permission(permission: str):
    """
    Dependency factory: resolves to the current user when any of their roles grants
    `permission`, otherwise 403.
    """
    if permission not in PERMISSION_NAMES:
        raise ValueError(f"Unknown permission: {permission}")

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        roles = get_user_roles(current_user)
        if not has_permission(roles, permission):
            logger.warning(f"🚫 User {current_user.id} ({roles}) denied {permission}")
            raise HTTPException(status_code=403, detail="You do not have permission to perform this action")
        return current_user

    return checker
