from chefbook.models.base import Base
from chefbook.models.booking import Booking, BookingStatus
from chefbook.models.chef import ChefProfile
from chefbook.models.message import Message
from chefbook.models.review import Review
from chefbook.models.user import User, UserRole

__all__ = ["Base", "User", "UserRole", "ChefProfile", "Review", "Booking", "BookingStatus", "Message"]
