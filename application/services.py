"""Application Services - Business use cases"""
from uuid import UUID
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel

from domain.repositories import ReservationRepository, BillingRepository
from domain.entities import Reservation, BillingRecord
from domain.enums import ReservationStatus, BillingStatus, Location
from domain.exceptions import NotFoundError, InvalidStateError
from domain.pricing import calculate_items, get_pricing_rules
from domain.value_objects import (
    StayPeriod, CheckInRequestDetails, CheckOutRequestDetails, PricingRule, to_local_naive
)
from infrastructure.logger import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Start of the local calendar day and start of the next one"""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class ReservationStats(BaseModel):
    today_check_ins: int
    today_check_outs: int
    active_reservations: int
    total_revenue: Decimal


class BillingStats(BaseModel):
    pending_count: int
    pending_amount: Decimal
    processed_today: int
    processed_today_amount: Decimal
    total_today: Decimal


class ReservationService:
    """Service for reservation lookup, check-in and check-out"""

    def __init__(self, repository: ReservationRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock or datetime.now

    async def create_reservation(
        self,
        guest_name: str,
        guest_email: str,
        guest_phone: str,
        accommodation_type: str,
        accommodation_name: str,
        location: Location,
        check_in: datetime,
        check_out: datetime,
        number_of_guests: int,
        total_amount: Decimal,
        special_requests: Optional[str] = None,
        reservation_code: Optional[str] = None
    ) -> Reservation:
        """Register a confirmed reservation"""
        stay = StayPeriod(check_in=check_in, check_out=check_out)
        now = self.clock()

        reservation = Reservation(
            reservation_code=reservation_code or await self._generate_reservation_code(now),
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            accommodation_type=accommodation_type,
            accommodation_name=accommodation_name,
            location=location,
            stay=stay,
            number_of_guests=number_of_guests,
            total_amount=total_amount,
            special_requests=special_requests,
            status=ReservationStatus.CONFIRMED,
            created_at=now,
            modified_at=now
        )
        saved = await self.repository.save(reservation)
        logger.info(
            "reservation_created",
            reservation_code=saved.reservation_code,
            guest=saved.guest_name,
            location=saved.location.value,
        )
        return saved

    async def get_reservation(self, reservation_id: UUID) -> Reservation:
        """Get reservation by ID"""
        reservation = await self.repository.find_by_id(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    async def find_by_code(self, code: str) -> Optional[Reservation]:
        """Find reservation by code, ignoring case"""
        reservation = await self.repository.find_by_code(code)
        if reservation:
            logger.info(
                "reservation_found",
                reservation_code=reservation.reservation_code,
                guest=reservation.guest_name,
                status=reservation.status.value,
            )
        else:
            logger.info("reservation_not_found", reservation_code=code)
        return reservation

    async def perform_check_in(
        self,
        reservation_id: UUID,
        details: CheckInRequestDetails
    ) -> Reservation:
        """Check in guests of a confirmed reservation"""
        reservation = await self.get_reservation(reservation_id)

        try:
            check_in_details = reservation.check_in(details, self.clock())
        except InvalidStateError:
            logger.warning(
                "check_in_rejected",
                reservation_code=reservation.reservation_code,
                status=reservation.status.value,
            )
            raise

        await self.repository.update(reservation)
        logger.info(
            "check_in_completed",
            reservation_code=reservation.reservation_code,
            guest=reservation.guest_name,
            checked_in_by=check_in_details.checked_in_by,
            checked_in_at=check_in_details.checked_in_at.isoformat(),
        )
        return reservation

    async def perform_check_out(
        self,
        reservation_id: UUID,
        details: CheckOutRequestDetails
    ) -> Reservation:
        """Check out guests of a checked-in reservation"""
        reservation = await self.get_reservation(reservation_id)

        try:
            check_out_details = reservation.check_out(details, self.clock())
        except InvalidStateError:
            logger.warning(
                "check_out_rejected",
                reservation_code=reservation.reservation_code,
                status=reservation.status.value,
            )
            raise

        await self.repository.update(reservation)
        logger.info(
            "check_out_completed",
            reservation_code=reservation.reservation_code,
            guest=reservation.guest_name,
            checked_out_by=check_out_details.checked_out_by,
            room_condition=check_out_details.room_condition.value,
            damages_reported=check_out_details.damages_reported,
        )
        return reservation

    async def cancel_reservation(self, reservation_id: UUID) -> Reservation:
        """Cancel a confirmed reservation"""
        reservation = await self.get_reservation(reservation_id)

        try:
            reservation.cancel(self.clock())
        except InvalidStateError:
            logger.warning(
                "cancel_rejected",
                reservation_code=reservation.reservation_code,
                status=reservation.status.value,
            )
            raise

        await self.repository.update(reservation)
        logger.info("reservation_cancelled", reservation_code=reservation.reservation_code)
        return reservation

    # ==================== QUERIES ====================
    async def today_check_ins(self) -> List[Reservation]:
        """Confirmed reservations arriving today, earliest first"""
        start, end = _day_bounds(self.clock())
        confirmed = await self.repository.find_by_status(ReservationStatus.CONFIRMED)
        return sorted(
            [r for r in confirmed if start <= r.check_in_date < end],
            key=lambda r: r.check_in_date
        )

    async def today_check_outs(self) -> List[Reservation]:
        """Checked-in reservations leaving today, earliest first"""
        start, end = _day_bounds(self.clock())
        checked_in = await self.repository.find_by_status(ReservationStatus.CHECKED_IN)
        return sorted(
            [r for r in checked_in if start <= r.check_out_date < end],
            key=lambda r: r.check_out_date
        )

    async def active_reservations(self) -> List[Reservation]:
        """Checked-in reservations, most recent arrival first"""
        checked_in = await self.repository.find_by_status(ReservationStatus.CHECKED_IN)
        return sorted(checked_in, key=lambda r: r.check_in_date, reverse=True)

    async def all_reservations(self) -> List[Reservation]:
        """All reservations, most recent arrival first"""
        reservations = await self.repository.find_all()
        return sorted(reservations, key=lambda r: r.check_in_date, reverse=True)

    async def reservation_history(self, limit: int = 50) -> List[Reservation]:
        """Most recently created reservations"""
        reservations = await self.repository.find_all()
        return sorted(reservations, key=lambda r: r.created_at, reverse=True)[:limit]

    async def get_stats(self) -> ReservationStats:
        active = await self.active_reservations()
        return ReservationStats(
            today_check_ins=len(await self.today_check_ins()),
            today_check_outs=len(await self.today_check_outs()),
            active_reservations=len(active),
            total_revenue=sum((r.total_amount for r in active), Decimal("0"))
        )

    async def _generate_reservation_code(self, now: datetime) -> str:
        """Next free code of the form CS<year><sequence>"""
        prefix = f"CS{now.year}"
        sequence = len([
            r for r in await self.repository.find_all()
            if r.reservation_code.upper().startswith(prefix)
        ]) + 1
        while await self.repository.find_by_code(f"{prefix}{sequence:03d}"):
            sequence += 1
        return f"{prefix}{sequence:03d}"


class BillingService:
    """Service for companion billing created at the gate"""

    def __init__(self, repository: BillingRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock or datetime.now

    async def create_from_access(
        self,
        access_record_id: str,
        member_name: str,
        member_code: str,
        membership_type: str,
        location: Location,
        companions_count: int,
        access_time: datetime,
        gatekeeper_name: str,
        notes: Optional[str] = None
    ) -> BillingRecord:
        """Create a pending billing record for a member's companions.

        The fee is chosen from the weekday of the access itself, so a
        record entered late still gets the fee of the day the companions
        came in.
        """
        location = Location(location)
        access_time = to_local_naive(access_time)
        billing_items = calculate_items(location, companions_count, access_time.date())

        record = BillingRecord.create(
            access_record_id=access_record_id,
            member_name=member_name,
            member_code=member_code,
            membership_type=membership_type,
            location=location,
            companions_count=companions_count,
            access_time=access_time,
            gatekeeper_name=gatekeeper_name,
            billing_items=billing_items,
            notes=notes
        )
        saved = await self.repository.save(record)
        logger.info(
            "billing_created",
            billing_id=str(saved.billing_id),
            member=member_name,
            companions=companions_count,
            amount=str(saved.total_amount),
            location=location.value,
        )
        return saved

    async def get_billing(self, billing_id: UUID) -> BillingRecord:
        """Get billing record by ID"""
        record = await self.repository.find_by_id(billing_id)
        if not record:
            raise NotFoundError("Billing record", billing_id)
        return record

    async def process_billing(
        self,
        billing_id: UUID,
        processed_by: str,
        notes: Optional[str] = None
    ) -> bool:
        """Mark a charge as collected"""
        record = await self.get_billing(billing_id)
        record.process(processed_by, self.clock(), notes)
        await self.repository.update(record)
        logger.info(
            "billing_processed",
            billing_id=str(billing_id),
            amount=str(record.total_amount),
            processed_by=processed_by,
        )
        return True

    async def cancel_billing(
        self,
        billing_id: UUID,
        cancelled_by: str,
        reason: str
    ) -> bool:
        """Cancel a charge, whatever its current status"""
        record = await self.get_billing(billing_id)
        previous_status = record.status
        record.cancel(cancelled_by, reason, self.clock())
        await self.repository.update(record)
        logger.info(
            "billing_cancelled",
            billing_id=str(billing_id),
            previous_status=previous_status.value,
            reason=reason,
            cancelled_by=cancelled_by,
        )
        return True

    # ==================== QUERIES ====================
    async def pending_records(self) -> List[BillingRecord]:
        """Pending records, latest access first"""
        pending = await self.repository.find_by_status(BillingStatus.PENDING)
        return sorted(pending, key=lambda r: r.access_time, reverse=True)

    async def all_records(self, limit: int = 50) -> List[BillingRecord]:
        """All records, latest access first"""
        records = await self.repository.find_all()
        return sorted(records, key=lambda r: r.access_time, reverse=True)[:limit]

    def get_pricing_rules(self, location: Optional[Location] = None) -> List[PricingRule]:
        return get_pricing_rules(location)

    async def get_stats(self) -> BillingStats:
        start, end = _day_bounds(self.clock())
        records = await self.repository.find_all()

        pending = [r for r in records if r.status == BillingStatus.PENDING]
        today = [r for r in records if start <= r.access_time < end]
        processed_today = [r for r in today if r.status == BillingStatus.PROCESSED]

        return BillingStats(
            pending_count=len(pending),
            pending_amount=sum((r.total_amount for r in pending), Decimal("0")),
            processed_today=len(processed_today),
            processed_today_amount=sum((r.total_amount for r in processed_today), Decimal("0")),
            total_today=sum((r.total_amount for r in today), Decimal("0"))
        )
