from app.models.profile import Profile
from app.models.catalog import GolfCourse, TeeTime, Hotel, HotelRoom, TravelPackage
from app.models.booking import Booking
from app.models.payment import Payment
from app.models.settlement import SplitSettlement
from app.models.notification import Notification

# This makes the models directory a Python package and ensures all models are loaded
