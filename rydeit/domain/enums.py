"""Domain enumerations and state-transition rules."""

import enum


class BookingStatus(str, enum.Enum):
    PENDING_PAYMENT = "pending_payment"
    VERIFYING_PAYMENT = "verifying_payment"
    BOOKING_CONFIRMED = "booking_confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine: maps current status -> set of valid next statuses
BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING_PAYMENT: {
        BookingStatus.VERIFYING_PAYMENT,
        BookingStatus.CANCELLED,
    },
    BookingStatus.VERIFYING_PAYMENT: {
        BookingStatus.BOOKING_CONFIRMED,
        BookingStatus.PENDING_PAYMENT,  # payment proof rejected
        BookingStatus.CANCELLED,
    },
    BookingStatus.BOOKING_CONFIRMED: {BookingStatus.ONGOING, BookingStatus.CANCELLED},
    BookingStatus.ONGOING: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


class HandoverMethod(str, enum.Enum):
    GARAGE = "garage"
    HOME = "home"


class PaymentMethod(str, enum.Enum):
    UPI = "upi"
    CASH = "cash"


class BikeCategory(str, enum.Enum):
    SCOOTER = "Scooter"
    BIKES = "Bikes"
    ROYAL_ENFIELD = "Royal Enfield"
    SPORTS = "Sports"


class BikeStatus(str, enum.Enum):
    AVAILABLE = "Available"
    BOOKED = "Booked"
    RUNNING = "Running"
    MAINTENANCE = "Maintenance"


class BookingFilter(str, enum.Enum):
    ALL = "all"
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    OVERDUE = "overdue"
