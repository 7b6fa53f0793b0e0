"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field, root_validator
from uuid import UUID, uuid4
from datetime import datetime
from typing import Optional, List
from decimal import Decimal

from domain.enums import ReservationStatus, BillingStatus, Location
from domain.exceptions import InvalidStateError
from domain.value_objects import (
    StayPeriod, CheckInRequestDetails, CheckInDetails,
    CheckOutRequestDetails, CheckOutDetails, BillingItem, to_local_naive
)


class Reservation(BaseModel):
    """Reservation Aggregate Root Entity"""

    # Identity
    reservation_id: UUID = Field(default_factory=uuid4)
    reservation_code: str = Field(min_length=1)

    # Guest
    guest_name: str
    guest_email: str
    guest_phone: str

    # Stay
    accommodation_type: str
    accommodation_name: str
    location: Location
    stay: StayPeriod
    number_of_guests: int = Field(ge=1)
    total_amount: Decimal = Field(ge=0)
    special_requests: Optional[str] = None

    # Status
    status: ReservationStatus = ReservationStatus.CONFIRMED

    # Child records, attached only through check_in / check_out
    check_in_details: Optional[CheckInDetails] = None
    check_out_details: Optional[CheckOutDetails] = None

    # Metadata
    created_at: datetime = Field(default_factory=datetime.now)
    modified_at: datetime = Field(default_factory=datetime.now)
    version: int = 1

    class Config:
        from_attributes = True

    @root_validator(skip_on_failure=True)
    def details_match_status(cls, values):
        status = values.get("status")
        checked_in = status in (ReservationStatus.CHECKED_IN, ReservationStatus.CHECKED_OUT)
        if (values.get("check_in_details") is not None) != checked_in:
            raise ValueError(f"Check-in details do not match status {status.value}")
        if (values.get("check_out_details") is not None) != (status == ReservationStatus.CHECKED_OUT):
            raise ValueError(f"Check-out details do not match status {status.value}")
        return values

    @property
    def check_in_date(self) -> datetime:
        return self.stay.check_in

    @property
    def check_out_date(self) -> datetime:
        return self.stay.check_out

    # ==================== STATE TRANSITION METHODS ====================
    def check_in(self, details: CheckInRequestDetails, now: datetime) -> CheckInDetails:
        """Mark guest as checked in"""
        if self.status != ReservationStatus.CONFIRMED:
            raise InvalidStateError("check in", self.status)

        self.check_in_details = CheckInDetails(**details.model_dump(), checked_in_at=now)
        self.status = ReservationStatus.CHECKED_IN
        self._touch(now)
        return self.check_in_details

    def check_out(self, details: CheckOutRequestDetails, now: datetime) -> CheckOutDetails:
        """Process guest check-out"""
        if self.status != ReservationStatus.CHECKED_IN:
            raise InvalidStateError("check out", self.status)

        self.check_out_details = CheckOutDetails(**details.model_dump(), checked_out_at=now)
        self.status = ReservationStatus.CHECKED_OUT
        self._touch(now)
        return self.check_out_details

    def cancel(self, now: datetime) -> None:
        """Cancel a reservation that has not started"""
        if self.status != ReservationStatus.CONFIRMED:
            raise InvalidStateError("cancel", self.status)

        self.status = ReservationStatus.CANCELLED
        self._touch(now)

    # ==================== QUERY METHODS ====================
    def matches_code(self, code: str) -> bool:
        """Case-insensitive exact match on the reservation code"""
        return self.reservation_code.lower() == code.lower()

    def _touch(self, now: datetime) -> None:
        self.modified_at = now
        self.version += 1


class BillingRecord(BaseModel):
    """Companion billing record created from a gate access"""

    # Identity
    billing_id: UUID = Field(default_factory=uuid4)
    access_record_id: str

    # Member
    member_name: str
    member_code: str
    membership_type: str

    # Access
    location: Location
    companions_count: int = Field(ge=0)
    access_time: datetime
    gatekeeper_name: str

    # Status & items
    status: BillingStatus = BillingStatus.PENDING
    billing_items: List[BillingItem] = []
    notes: Optional[str] = None

    # Resolution
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        access_record_id: str,
        member_name: str,
        member_code: str,
        membership_type: str,
        location: Location,
        companions_count: int,
        access_time: datetime,
        gatekeeper_name: str,
        billing_items: List[BillingItem],
        notes: Optional[str] = None
    ) -> "BillingRecord":
        """Create a pending billing record"""
        return BillingRecord(
            access_record_id=access_record_id,
            member_name=member_name,
            member_code=member_code,
            membership_type=membership_type,
            location=location,
            companions_count=companions_count,
            access_time=to_local_naive(access_time),
            gatekeeper_name=gatekeeper_name,
            status=BillingStatus.PENDING,
            billing_items=billing_items,
            notes=notes
        )

    # ==================== COMPUTED PROPERTIES ====================
    @property
    def total_amount(self) -> Decimal:
        """Sum of line item totals"""
        return sum((item.total for item in self.billing_items), Decimal("0"))

    # ==================== STATE TRANSITION METHODS ====================
    def process(self, processed_by: str, now: datetime, notes: Optional[str] = None) -> None:
        """Mark the charge as collected.

        Allowed from any status. Processing a cancelled record makes it
        processed again; there is no separate un-cancel operation.
        """
        self.status = BillingStatus.PROCESSED
        self.processed_at = now
        self.processed_by = processed_by
        if notes:
            self.append_note(notes)

    def cancel(self, cancelled_by: str, reason: str, now: datetime) -> None:
        """Cancel the charge.

        Allowed from any status, including processed.
        """
        self.status = BillingStatus.CANCELLED
        self.processed_at = now
        self.processed_by = cancelled_by
        self.append_note(f"Cancelado: {reason}")

    def append_note(self, text: str) -> None:
        if self.notes:
            self.notes = self.notes + "\n" + text
        else:
            self.notes = text
