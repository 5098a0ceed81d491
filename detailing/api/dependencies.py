# ============================================================================
# FILE: detailing/api/dependencies.py
# Authentication dependencies for identity-provider JWT bearer tokens
# ============================================================================
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from jose import JWTError, jwt
import logging

from detailing.config.database import get_db
from detailing.config.settings import settings
from detailing.models.user import User, UserRole, UserStatus
from detailing.services.notification.notification_service import NotificationService

logger = logging.getLogger(__name__)

# ============================================================================
# Security Schemes
# ============================================================================

jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Access token issued by the identity provider",
    auto_error=False
)


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ============================================================================
# JWT Token Functions
# ============================================================================

def verify_access_token(token: str) -> dict:
    """
    Verify and decode an identity-provider JWT.

    Returns:
        Decoded token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={"verify_aud": False}
        )
    except JWTError as e:
        raise _unauthorized(f"Could not validate credentials: {str(e)}")


def provision_user(db: Session, external_id: str, claims: dict) -> User:
    """
    Return the local user for `external_id`, creating it on first sight.

    New users start as active clients with zeroed counters and get a
    welcome notification.
    """
    user = db.query(User).filter(User.external_id == external_id).first()
    if user is not None:
        return user

    user = User(
        external_id=external_id,
        name=claims.get("name"),
        email=claims.get("email"),
        phone=claims.get("phone_number") or claims.get("phone"),
        role=UserRole.CLIENT,
        status=UserStatus.ACTIVE,
        times_serviced=0,
        total_spent=0.0,
        cancellation_count=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request provisioned the same subject first
        db.rollback()
        return db.query(User).filter(User.external_id == external_id).one()

    db.refresh(user)
    logger.info(f"Provisioned user {user.id} for subject {external_id}")
    NotificationService.customer_welcome(user)
    return user


# ============================================================================
# JWT Authentication Dependencies
# ============================================================================

async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(jwt_security),
        db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None:
        raise _unauthorized()

    payload = verify_access_token(credentials.credentials)

    external_id: Optional[str] = payload.get("sub")
    if not external_id:
        raise _unauthorized("Could not validate credentials")

    return provision_user(db, external_id, payload)


async def get_current_active_user(
        current_user: User = Depends(get_current_user)
) -> User:
    """Dependency to ensure the current user is active."""
    if current_user.status != UserStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    return current_user


async def require_admin(
        current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Dependency that requires the admin role.

    Usage in routes:
        @router.put("/admin/schedule/business-hours")
        async def set_hours(user: User = Depends(require_admin)):
            pass
    """
    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return current_user
