"""Domain Enums"""
from enum import Enum


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class Location(str, Enum):
    EL_SUNZAL = "El Sunzal"
    CORINTO = "Corinto"


class RoomCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class BillingStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    CANCELLED = "cancelled"


class StaffRole(str, Enum):
    ADMIN = "admin"
    HOST = "host"
    GATEKEEPER = "gatekeeper"
