from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
import enum

from app.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    GOLF_VENDOR = "golf_vendor"
    HOTEL_VENDOR = "hotel_vendor"
    TRAVEL_VENDOR = "travel_vendor"
    USER = "user"


VENDOR_ROLES = {UserRole.GOLF_VENDOR, UserRole.HOTEL_VENDOR, UserRole.TRAVEL_VENDOR}


class Profile(Base):
    """Role and contact data for an identity issued by the auth provider."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True)
    full_name = Column(String(255))
    phone = Column(String(50))
    role = Column(
        Enum(
            UserRole,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=32,
        ),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(DateTime(timezone=True), default=func.now())
