from .user import User
from .venue import Venue
from .venue_field import VenueField
from .time_slot import TimeSlot
from .booking import Booking
from .booking_slot import BookingSlot
from .slot_reservation import SlotReservation
from .special_occasion import SpecialOccasion
from .notification import Notification
