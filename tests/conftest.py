"""
Shared pytest configuration
"""
from datetime import date
from decimal import Decimal
import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.database import Base, get_db

# Load every model so relationships resolve
import app.models  # noqa: F401
from app.models.catalog import GolfCourse, TeeTime, Hotel, HotelRoom, TravelPackage
from app.models.profile import Profile, UserRole
from app.schemas.booking import BookingCreate
from app.schemas.payment import Invoice
from app.services import booking_service
from app.services.auth import Principal
from app.services.notification_service import NotificationService, get_notification_service
from app.services.xendit_client import get_payment_gateway


# In-memory database for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

WEBHOOK_TOKEN = "test-callback-token"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setattr(settings, "XENDIT_WEBHOOK_TOKEN", WEBHOOK_TOKEN)
    monkeypatch.setattr(settings, "AUTH_JWT_SECRET", "test-secret")
    monkeypatch.setattr(settings, "AUTH_JWT_AUDIENCE", None)
    monkeypatch.setattr(settings, "PUBLIC_APP_URL", "https://golf.example.com")
    return settings


@pytest.fixture
def db():
    """Create the test database and drop it afterwards"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def override_get_db(db):
    def _get_db():
        try:
            yield db
        finally:
            pass
    return _get_db


def _profile(db, role, email, full_name, phone=None):
    profile = Profile(
        id=str(uuid.uuid4()),
        email=email,
        full_name=full_name,
        phone=phone,
        role=role,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def admin_profile(db):
    return _profile(db, UserRole.ADMIN, "ops@example.com", "Platform Ops")


@pytest.fixture
def customer_profile(db):
    return _profile(db, UserRole.USER, "golfer@example.com", "Budi Santoso", "+628111111111")


@pytest.fixture
def other_customer_profile(db):
    return _profile(db, UserRole.USER, "other@example.com", "Sari Dewi")


@pytest.fixture
def golf_vendor_profile(db):
    return _profile(db, UserRole.GOLF_VENDOR, "pro@bali-national.example.com", "Bali National Golf")


@pytest.fixture
def hotel_vendor_profile(db):
    return _profile(db, UserRole.HOTEL_VENDOR, "desk@nusa-resort.example.com", "Nusa Resort")


@pytest.fixture
def travel_vendor_profile(db):
    return _profile(db, UserRole.TRAVEL_VENDOR, "trips@island-tours.example.com", "Island Tours")


def as_principal(profile):
    return Principal(
        id=profile.id,
        role=UserRole(profile.role),
        email=profile.email,
        full_name=profile.full_name,
        phone=profile.phone,
    )


@pytest.fixture
def admin(admin_profile):
    return as_principal(admin_profile)


@pytest.fixture
def customer(customer_profile):
    return as_principal(customer_profile)


@pytest.fixture
def other_customer(other_customer_profile):
    return as_principal(other_customer_profile)


@pytest.fixture
def golf_vendor(golf_vendor_profile):
    return as_principal(golf_vendor_profile)


@pytest.fixture
def hotel_vendor(hotel_vendor_profile):
    return as_principal(hotel_vendor_profile)


@pytest.fixture
def travel_vendor(travel_vendor_profile):
    return as_principal(travel_vendor_profile)


@pytest.fixture
def golf_course(db, golf_vendor_profile):
    course = GolfCourse(
        vendor_id=golf_vendor_profile.id,
        name="Bali National Golf Club",
        location="Nusa Dua, Bali",
        rating=4.8,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@pytest.fixture
def tee_time(db, golf_course):
    slot = TeeTime(
        course_id=golf_course.id,
        date=date(2026, 11, 14),
        time="07:30",
        available_slots=4,
        price=Decimal("2500000"),
    )
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@pytest.fixture
def hotel(db, hotel_vendor_profile):
    hotel = Hotel(
        vendor_id=hotel_vendor_profile.id,
        name="Nusa Resort",
        location="Nusa Dua, Bali",
        star_rating=5,
    )
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return hotel


@pytest.fixture
def hotel_room(db, hotel):
    room = HotelRoom(
        hotel_id=hotel.id,
        room_type="Deluxe Ocean View",
        price_per_night=Decimal("2650000"),
        capacity=2,
        available_count=3,
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@pytest.fixture
def travel_package(db, travel_vendor_profile):
    package = TravelPackage(
        vendor_id=travel_vendor_profile.id,
        name="Airport Transfer",
        package_type="airport_transfer",
        price=Decimal("350000"),
        duration_hours=2,
    )
    db.add(package)
    db.commit()
    db.refresh(package)
    return package


@pytest.fixture
def notifier():
    return NotificationService()


@pytest.fixture
def booking_request(golf_course, tee_time, hotel, hotel_room):
    """Factory for a golf + hotel package request"""
    def _request(total="7800000"):
        return _golf_hotel_request(golf_course, tee_time, hotel, hotel_room, total)
    return _request


def _golf_hotel_request(golf_course, tee_time, hotel, hotel_room, total="7800000"):
    return BookingCreate(
        booking_type="package",
        booking_details={
            "golf": {
                "course_id": golf_course.id,
                "tee_time_id": tee_time.id,
                "players": 2,
                "date": "2026-11-14",
                "time": "07:30",
            },
            "hotel": {
                "hotel_id": hotel.id,
                "room_id": hotel_room.id,
                "check_in": "2026-11-13",
                "check_out": "2026-11-15",
                "guests": 2,
            },
        },
        total_amount=Decimal(total),
        notes="Anniversary trip",
    )


@pytest.fixture
def package_booking(db, customer, golf_course, tee_time, hotel, hotel_room, notifier):
    """Golf + hotel package awaiting both vendors"""
    return booking_service.create_booking(
        db, customer, _golf_hotel_request(golf_course, tee_time, hotel, hotel_room), notifier=notifier
    )


@pytest.fixture
def approved_booking(db, package_booking, golf_vendor, hotel_vendor, notifier):
    booking_service.record_vendor_decision(db, golf_vendor, package_booking.id, "approve", notifier=notifier)
    return booking_service.record_vendor_decision(
        db, hotel_vendor, package_booking.id, "approve", notifier=notifier
    )


class FakeGateway:
    """In-memory stand-in for XenditClient"""

    def __init__(self):
        self.created = []
        self.expired = []
        self.fail_with = None
        self.on_create = None

    def create_invoice(self, params):
        if self.fail_with is not None:
            raise self.fail_with
        self.created.append(params)
        invoice_id = f"inv-{len(self.created)}"
        if self.on_create is not None:
            self.on_create(params)
        return Invoice(
            id=invoice_id,
            invoice_url=f"https://checkout.xendit.co/web/{invoice_id}",
            expiry_date="2026-11-02T10:00:00.000Z",
            status="PENDING",
        )

    def expire_invoice(self, invoice_id):
        self.expired.append(invoice_id)
        return Invoice(id=invoice_id, invoice_url="", status="EXPIRED")


@pytest.fixture
def gateway():
    return FakeGateway()


def bearer(profile_or_principal):
    token = jwt.encode(
        {"sub": profile_or_principal.id, "email": profile_or_principal.email},
        settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(override_get_db, gateway, notifier):
    from app.main import app

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notification_service] = lambda: notifier
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
