"""In-Memory Repository Implementations"""
from typing import Optional, List, Dict
from uuid import UUID

from domain.repositories import ReservationRepository, BillingRepository
from domain.entities import Reservation, BillingRecord
from domain.enums import ReservationStatus, BillingStatus


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Reservation] = {}

    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation to memory"""
        existing = await self.find_by_code(reservation.reservation_code)
        if existing and existing.reservation_id != reservation.reservation_id:
            raise ValueError(f"Reservation code already exists: {reservation.reservation_code}")
        self._storage[reservation.reservation_id] = reservation
        return reservation

    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        return self._storage.get(reservation_id)

    async def find_by_code(self, code: str) -> Optional[Reservation]:
        """Find reservation by code, ignoring case"""
        for reservation in self._storage.values():
            if reservation.matches_code(code):
                return reservation
        return None

    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        """Find reservations in a given status"""
        return [r for r in self._storage.values() if r.status == status]

    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        return list(self._storage.values())

    async def update(self, reservation: Reservation) -> Reservation:
        """Update reservation"""
        if reservation.reservation_id in self._storage:
            self._storage[reservation.reservation_id] = reservation
            return reservation
        raise ValueError("Reservation not found")


class InMemoryBillingRepository(BillingRepository):
    """In-memory implementation of BillingRepository.

    Records are listed newest first, in the order they were saved.
    """

    def __init__(self):
        self._storage: Dict[UUID, BillingRecord] = {}

    async def save(self, record: BillingRecord) -> BillingRecord:
        """Save billing record to memory"""
        self._storage[record.billing_id] = record
        return record

    async def find_by_id(self, billing_id: UUID) -> Optional[BillingRecord]:
        """Find billing record by ID"""
        return self._storage.get(billing_id)

    async def find_by_status(self, status: BillingStatus) -> List[BillingRecord]:
        """Find billing records in a given status"""
        return [r for r in await self.find_all() if r.status == status]

    async def find_all(self) -> List[BillingRecord]:
        """Find all billing records, newest first"""
        return list(reversed(list(self._storage.values())))

    async def update(self, record: BillingRecord) -> BillingRecord:
        """Update billing record"""
        if record.billing_id in self._storage:
            self._storage[record.billing_id] = record
            return record
        raise ValueError("Billing record not found")
