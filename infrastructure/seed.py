"""Demo data for a freshly started in-memory deployment"""
from datetime import datetime, timedelta
from decimal import Decimal

from domain.entities import Reservation, BillingRecord
from domain.enums import ReservationStatus, Location
from domain.pricing import calculate_items
from domain.repositories import ReservationRepository, BillingRepository
from domain.value_objects import StayPeriod, CheckInDetails
from infrastructure.logger import get_logger

logger = get_logger(__name__)


def _at(day: datetime, hour: int) -> datetime:
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


def demo_reservations(now: datetime):
    today = _at(now, 0)
    yesterday = today - timedelta(days=1)
    tomorrow = today + timedelta(days=1)

    return [
        Reservation(
            reservation_code="CS2024001",
            guest_name="Ana Patricia López",
            guest_email="ana.lopez@email.com",
            guest_phone="+503 7234-5678",
            accommodation_type="Apartamento",
            accommodation_name="Apartamento Vista Mar",
            location=Location.EL_SUNZAL,
            stay=StayPeriod(check_in=_at(today, 15), check_out=_at(today + timedelta(days=2), 12)),
            number_of_guests=4,
            total_amount=Decimal("250.00"),
            status=ReservationStatus.CONFIRMED,
            special_requests="Cuna para bebé, llegada tardía aprox. 8 PM",
            created_at=now - timedelta(days=5),
        ),
        Reservation(
            reservation_code="CS2024002",
            guest_name="Roberto Martínez",
            guest_email="roberto.martinez@email.com",
            guest_phone="+503 7890-1234",
            accommodation_type="Casa",
            accommodation_name="Casa Familiar Corinto",
            location=Location.CORINTO,
            stay=StayPeriod(check_in=_at(today, 14), check_out=_at(today + timedelta(days=3), 12)),
            number_of_guests=6,
            total_amount=Decimal("450.00"),
            status=ReservationStatus.CONFIRMED,
            special_requests="Acceso a campo de golf",
            created_at=now - timedelta(days=7),
        ),
        Reservation(
            reservation_code="CS2024003",
            guest_name="María Fernanda Sánchez",
            guest_email="mf.sanchez@email.com",
            guest_phone="+503 6543-2109",
            accommodation_type="Suite",
            accommodation_name="Suite Presidencial",
            location=Location.EL_SUNZAL,
            stay=StayPeriod(check_in=_at(tomorrow, 15), check_out=_at(tomorrow + timedelta(days=1), 12)),
            number_of_guests=2,
            total_amount=Decimal("180.00"),
            status=ReservationStatus.CONFIRMED,
            created_at=now - timedelta(days=3),
        ),
        Reservation(
            reservation_code="CS2024004",
            guest_name="Carlos Hernández",
            guest_email="carlos.hernandez@email.com",
            guest_phone="+503 7654-3210",
            accommodation_type="Apartamento",
            accommodation_name="Apartamento Estándar",
            location=Location.EL_SUNZAL,
            stay=StayPeriod(check_in=_at(yesterday, 15), check_out=_at(today, 12)),
            number_of_guests=3,
            total_amount=Decimal("200.00"),
            status=ReservationStatus.CHECKED_IN,
            created_at=now - timedelta(days=10),
            check_in_details=CheckInDetails(
                checked_in_at=_at(yesterday, 15),
                checked_in_by="Carlos Rodríguez",
                actual_arrival_time=_at(yesterday, 15),
                guests_present=3,
                documents_verified=True,
                key_provided=True,
                notes="Check-in sin problemas, huéspedes muy amables",
            ),
        ),
    ]


def demo_billing_records(now: datetime):
    first_access = now - timedelta(minutes=30)
    second_access = now - timedelta(minutes=15)

    return [
        BillingRecord.create(
            access_record_id="access_1",
            member_name="María José González",
            member_code="MJ001",
            membership_type="Contribuyente",
            location=Location.EL_SUNZAL,
            companions_count=2,
            access_time=first_access,
            gatekeeper_name="Roberto Portillo",
            billing_items=calculate_items(Location.EL_SUNZAL, 2, first_access.date()),
            notes="Acceso registrado automáticamente desde portería",
        ),
        BillingRecord.create(
            access_record_id="access_2",
            member_name="Carlos Rivera",
            member_code="CR002",
            membership_type="Fundador",
            location=Location.CORINTO,
            companions_count=1,
            access_time=second_access,
            gatekeeper_name="Roberto Portillo",
            billing_items=calculate_items(Location.CORINTO, 1, second_access.date()),
        ),
    ]


async def seed_demo_data(
    reservation_repo: ReservationRepository,
    billing_repo: BillingRepository,
    now: datetime
) -> None:
    """Load the demo reservations and billing records"""
    reservations = demo_reservations(now)
    for reservation in reservations:
        await reservation_repo.save(reservation)

    records = demo_billing_records(now)
    for record in records:
        await billing_repo.save(record)

    logger.info("demo_data_loaded", reservations=len(reservations), billing_records=len(records))
