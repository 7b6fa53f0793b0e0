"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field, validator
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from domain.enums import Location, RoomCondition


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

class CreateReservationRequest(BaseModel):
    """Create reservation request DTO"""
    reservation_code: Optional[str] = None
    guest_name: str = Field(min_length=1)
    guest_email: str
    guest_phone: str
    accommodation_type: str
    accommodation_name: str
    location: Location
    check_in: datetime
    check_out: datetime
    number_of_guests: int = Field(ge=1)
    total_amount: Decimal = Field(ge=0)
    special_requests: Optional[str] = None


class CheckInRequest(BaseModel):
    """Check-in request DTO; the staff member comes from the token"""
    actual_arrival_time: Optional[datetime] = None
    guests_present: int = Field(ge=0)
    documents_verified: bool
    key_provided: bool
    notes: Optional[str] = None


class CheckOutRequest(BaseModel):
    """Check-out request DTO; the staff member comes from the token"""
    actual_departure_time: Optional[datetime] = None
    room_condition: RoomCondition
    damages_reported: bool = False
    damage_description: Optional[str] = None
    cleaning_required: bool = True
    key_returned: bool
    additional_charges: Decimal = Field(default=Decimal("0"), ge=0)
    guest_comments: Optional[str] = None
    host_comments: Optional[str] = None

    @validator('damage_description', always=True)
    def description_when_damaged(cls, v, values):
        if values.get('damages_reported') and not v:
            raise ValueError('A damage description is required when damages are reported')
        return v


class CheckInDetailsResponse(BaseModel):
    checked_in_at: datetime
    checked_in_by: str
    actual_arrival_time: datetime
    guests_present: int
    documents_verified: bool
    key_provided: bool
    notes: Optional[str] = None


class CheckOutDetailsResponse(BaseModel):
    checked_out_at: datetime
    checked_out_by: str
    actual_departure_time: datetime
    room_condition: str
    damages_reported: bool
    damage_description: Optional[str] = None
    cleaning_required: bool
    key_returned: bool
    additional_charges: Decimal
    guest_comments: Optional[str] = None
    host_comments: Optional[str] = None


class ReservationResponse(BaseModel):
    """Reservation response DTO"""
    reservation_id: UUID
    reservation_code: str
    guest_name: str
    guest_email: str
    guest_phone: str
    accommodation_type: str
    accommodation_name: str
    location: str
    check_in_date: datetime
    check_out_date: datetime
    number_of_guests: int
    total_amount: Decimal
    status: str
    special_requests: Optional[str] = None
    check_in_details: Optional[CheckInDetailsResponse] = None
    check_out_details: Optional[CheckOutDetailsResponse] = None
    created_at: datetime
    modified_at: datetime
    version: int


class ReservationStatsResponse(BaseModel):
    today_check_ins: int
    today_check_outs: int
    active_reservations: int
    total_revenue: Decimal


# ============================================================================
# BILLING SCHEMAS
# ============================================================================

class CreateBillingRequest(BaseModel):
    """Create billing from gate access request DTO"""
    access_record_id: str
    member_name: str
    member_code: str
    membership_type: str
    location: Location
    companions_count: int = Field(ge=0)
    access_time: Optional[datetime] = None
    notes: Optional[str] = None


class ProcessBillingRequest(BaseModel):
    """Process billing request DTO"""
    notes: Optional[str] = None


class CancelBillingRequest(BaseModel):
    """Cancel billing request DTO"""
    reason: str = Field(min_length=1)


class BillingItemResponse(BaseModel):
    item_id: UUID
    description: str
    unit_price: Decimal
    quantity: int
    total: Decimal
    location: str
    category: str


class BillingRecordResponse(BaseModel):
    """Billing record response DTO"""
    billing_id: UUID
    access_record_id: str
    member_name: str
    member_code: str
    membership_type: str
    location: str
    companions_count: int
    access_time: datetime
    gatekeeper_name: str
    status: str
    billing_items: List[BillingItemResponse]
    total_amount: Decimal
    notes: Optional[str] = None
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None


class BillingStatsResponse(BaseModel):
    pending_count: int
    pending_amount: Decimal
    processed_today: int
    processed_today_amount: Decimal
    total_today: Decimal


class PricingRuleResponse(BaseModel):
    location: str
    category: str
    description: str
    price: Decimal
    conditions: Optional[str] = None


class OperationResult(BaseModel):
    success: bool


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str

class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None

class UserResponse(BaseModel):
    """User response DTO"""
    user_id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    disabled: bool
