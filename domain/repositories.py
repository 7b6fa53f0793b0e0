"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from uuid import UUID

from domain.entities import Reservation, BillingRecord
from domain.enums import ReservationStatus, BillingStatus


class ReservationRepository(ABC):
    """Repository interface for Reservation Aggregate"""

    @abstractmethod
    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation"""
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Reservation]:
        """Find reservation by reservation code, ignoring case"""
        pass

    @abstractmethod
    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        """Find reservations in a given status"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        pass

    @abstractmethod
    async def update(self, reservation: Reservation) -> Reservation:
        """Update reservation"""
        pass


class BillingRepository(ABC):
    """Repository interface for BillingRecord Aggregate"""

    @abstractmethod
    async def save(self, record: BillingRecord) -> BillingRecord:
        """Save billing record"""
        pass

    @abstractmethod
    async def find_by_id(self, billing_id: UUID) -> Optional[BillingRecord]:
        """Find billing record by ID"""
        pass

    @abstractmethod
    async def find_by_status(self, status: BillingStatus) -> List[BillingRecord]:
        """Find billing records in a given status"""
        pass

    @abstractmethod
    async def find_all(self) -> List[BillingRecord]:
        """Find all billing records, newest first"""
        pass

    @abstractmethod
    async def update(self, record: BillingRecord) -> BillingRecord:
        """Update billing record"""
        pass
