"""
Caller identity.

Authentication is delegated to the external auth provider: it issues a signed
JWT whose ``sub`` is the profile id. This module verifies the token once at the
HTTP boundary and turns it into a ``Principal`` that is passed explicitly into
every service call.
"""
from dataclasses import dataclass
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.database import get_db
from app.exceptions import AuthenticationError, AuthorizationError
from app.models.profile import Profile, UserRole, VENDOR_ROLES

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    id: str
    role: UserRole = UserRole.USER
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role in VENDOR_ROLES

    def can_act_for_vendor(self, vendor_id: str) -> bool:
        return self.is_vendor and self.id == vendor_id


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options={"verify_aud": bool(settings.AUTH_JWT_AUDIENCE)},
        )
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        raise AuthenticationError("Could not validate credentials")


def principal_from_token(db: Session, token: str) -> Principal:
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Could not validate credentials")

    profile = db.query(Profile).filter(Profile.id == subject).first()
    if profile is None:
        # Signed up with the provider but no profile row yet: plain customer
        return Principal(id=subject, role=UserRole.USER, email=payload.get("email"))

    return Principal(
        id=profile.id,
        role=UserRole(profile.role),
        email=profile.email or payload.get("email"),
        full_name=profile.full_name,
        phone=profile.phone,
    )


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return principal_from_token(db, credentials.credentials)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError("Admin access required")
    return principal
