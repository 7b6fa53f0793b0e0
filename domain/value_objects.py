"""Domain Value Objects"""
from pydantic import BaseModel, Field, validator
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4
from typing import Optional

from domain.enums import Location, RoomCondition


def to_local_naive(value: datetime) -> datetime:
    """Normalize aware datetimes to naive local time"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class StayPeriod(BaseModel):
    """Value Object for the booked stay"""
    check_in: datetime
    check_out: datetime

    @validator('check_in', 'check_out')
    def normalize_timezone(cls, v):
        return to_local_naive(v)

    @validator('check_out')
    def check_out_after_check_in(cls, v, values):
        if 'check_in' in values and v <= values['check_in']:
            raise ValueError('Check-out must be after check-in')
        return v

    def nights(self) -> int:
        """Calculate number of nights"""
        return (self.check_out.date() - self.check_in.date()).days

    class Config:
        frozen = True


class CheckInRequestDetails(BaseModel):
    """Fields supplied by the staff member performing a check-in"""
    checked_in_by: str = Field(min_length=1)
    actual_arrival_time: datetime
    guests_present: int = Field(ge=0)
    documents_verified: bool
    key_provided: bool
    notes: Optional[str] = None

    class Config:
        frozen = True


class CheckInDetails(CheckInRequestDetails):
    """Check-in record attached to a reservation"""
    checked_in_at: datetime


class CheckOutRequestDetails(BaseModel):
    """Fields supplied by the staff member performing a check-out"""
    checked_out_by: str = Field(min_length=1)
    actual_departure_time: datetime
    room_condition: RoomCondition
    damages_reported: bool
    damage_description: Optional[str] = None
    cleaning_required: bool
    key_returned: bool
    additional_charges: Decimal = Field(default=Decimal("0"), ge=0)
    guest_comments: Optional[str] = None
    host_comments: Optional[str] = None

    class Config:
        frozen = True


class CheckOutDetails(CheckOutRequestDetails):
    """Check-out record attached to a reservation"""
    checked_out_at: datetime


class PricingRule(BaseModel):
    """One row of the companion fee table"""
    location: Location
    category: str
    description: str
    price: Decimal = Field(ge=0)
    conditions: Optional[str] = None

    class Config:
        frozen = True


class BillingItem(BaseModel):
    """Line item of a billing record"""
    item_id: UUID = Field(default_factory=uuid4)
    description: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    total: Optional[Decimal] = None
    location: Location
    category: str

    @validator('total', always=True)
    def total_matches_quantity(cls, v, values):
        if 'unit_price' not in values or 'quantity' not in values:
            return v
        expected = values['unit_price'] * values['quantity']
        if v is None:
            return expected
        if v != expected:
            raise ValueError('Line total must equal unit price times quantity')
        return v

    class Config:
        frozen = True
