from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Reservation
    CreateReservationRequest, CheckInRequest, CheckOutRequest,
    ReservationResponse, CheckInDetailsResponse, CheckOutDetailsResponse,
    ReservationStatsResponse,
    # Billing
    CreateBillingRequest, ProcessBillingRequest, CancelBillingRequest,
    BillingRecordResponse, BillingItemResponse, BillingStatsResponse,
    PricingRuleResponse, OperationResult,
    # Auth
    Token, UserResponse
)

from api.dependencies import (
    get_current_active_user, require_roles, fake_users_db, get_user,
    get_reservation_service, get_billing_service
)
from infrastructure.security import verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from infrastructure.config import get_settings
from infrastructure.logger import setup_logging, get_logger
from infrastructure.seed import seed_demo_data
from domain.auth import User

from application.services import ReservationService, BillingService
from infrastructure.repositories.in_memory_repositories import (
    InMemoryReservationRepository, InMemoryBillingRepository
)
from domain.enums import ReservationStatus, Location, RoomCondition, BillingStatus, StaffRole
from domain.exceptions import NotFoundError
from domain.value_objects import CheckInRequestDetails, CheckOutRequestDetails

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One isolated set of stores per application instance
    app.state.reservation_repo = InMemoryReservationRepository()
    app.state.billing_repo = InMemoryBillingRepository()
    if settings.seed_demo_data:
        await seed_demo_data(app.state.reservation_repo, app.state.billing_repo, datetime.now())
    logger.info("application_started", title=settings.app_title)
    yield
    logger.info("application_stopped")


app = FastAPI(
    title=settings.app_title,
    description="Reservation check-in/check-out and companion billing for club locations",
    version="1.0.0",
    lifespan=lifespan
)

host_staff = require_roles(StaffRole.HOST)
gate_staff = require_roles(StaffRole.GATEKEEPER)

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/reservation-status", tags=["Enum Reference"])
async def get_reservation_statuses():
    """Get all ReservationStatus enum values"""
    return {
        "values": [item.value for item in ReservationStatus],
        "description": "Reservation status values: confirmed, checked_in, checked_out, cancelled"
    }

@app.get("/api/enums/location", tags=["Enum Reference"])
async def get_locations():
    """Get all Location enum values"""
    return {
        "values": [item.value for item in Location],
        "description": "Club locations: El Sunzal, Corinto"
    }

@app.get("/api/enums/room-condition", tags=["Enum Reference"])
async def get_room_conditions():
    """Get all RoomCondition enum values"""
    return {
        "values": [item.value for item in RoomCondition],
        "description": "Room condition at check-out: excellent, good, fair, poor"
    }

@app.get("/api/enums/billing-status", tags=["Enum Reference"])
async def get_billing_statuses():
    """Get all BillingStatus enum values"""
    return {
        "values": [item.value for item in BillingStatus],
        "description": "Billing status values: pending, processed, cancelled"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(fake_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning("login_failed", username=form_data.username)
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return _user_to_response(current_user)

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    request: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(host_staff)
):
    """Register a confirmed reservation"""
    try:
        reservation = await service.create_reservation(
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            guest_phone=request.guest_phone,
            accommodation_type=request.accommodation_type,
            accommodation_name=request.accommodation_name,
            location=request.location,
            check_in=request.check_in,
            check_out=request.check_out,
            number_of_guests=request.number_of_guests,
            total_amount=request.total_amount,
            special_requests=request.special_requests,
            reservation_code=request.reservation_code
        )
        return _reservation_to_response(reservation)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/api/reservations", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_all_reservations(
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all reservations, most recent arrival first"""
    reservations = await service.all_reservations()
    return [_reservation_to_response(r) for r in reservations]

@app.get("/api/reservations/today/check-ins", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_today_check_ins(
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Confirmed reservations arriving today"""
    return [_reservation_to_response(r) for r in await service.today_check_ins()]

@app.get("/api/reservations/today/check-outs", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_today_check_outs(
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Checked-in reservations leaving today"""
    return [_reservation_to_response(r) for r in await service.today_check_outs()]

@app.get("/api/reservations/active", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_active_reservations(
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Reservations currently checked in"""
    return [_reservation_to_response(r) for r in await service.active_reservations()]

@app.get("/api/reservations/history", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_reservation_history(
    limit: int = Query(50, ge=1, le=500),
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Most recently created reservations"""
    return [_reservation_to_response(r) for r in await service.reservation_history(limit)]

@app.get("/api/reservations/stats", response_model=ReservationStatsResponse, tags=["Reservations"])
async def get_reservation_stats(
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Dashboard counters for the front desk"""
    stats = await service.get_stats()
    return ReservationStatsResponse(**stats.model_dump())

@app.get("/api/reservations/code/{reservation_code}", response_model=ReservationResponse, tags=["Reservations"])
async def get_reservation_by_code(
    reservation_code: str,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get reservation by code, ignoring case"""
    reservation = await service.find_by_code(reservation_code.strip())
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return _reservation_to_response(reservation)

@app.get("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get reservation by ID"""
    try:
        reservation = await service.get_reservation(reservation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _reservation_to_response(reservation)

@app.post("/api/reservations/{reservation_id}/check-in", response_model=ReservationResponse, tags=["Reservations"])
async def check_in_guest(
    reservation_id: UUID,
    request: CheckInRequest,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(host_staff)
):
    """Check in guests"""
    try:
        details = CheckInRequestDetails(
            checked_in_by=current_user.display_name,
            actual_arrival_time=request.actual_arrival_time or datetime.now(),
            guests_present=request.guests_present,
            documents_verified=request.documents_verified,
            key_provided=request.key_provided,
            notes=request.notes
        )
        reservation = await service.perform_check_in(reservation_id, details)
        return _reservation_to_response(reservation)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.post("/api/reservations/{reservation_id}/check-out", response_model=ReservationResponse, tags=["Reservations"])
async def check_out_guest(
    reservation_id: UUID,
    request: CheckOutRequest,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(host_staff)
):
    """Check out guests"""
    try:
        details = CheckOutRequestDetails(
            checked_out_by=current_user.display_name,
            actual_departure_time=request.actual_departure_time or datetime.now(),
            room_condition=request.room_condition,
            damages_reported=request.damages_reported,
            damage_description=request.damage_description,
            cleaning_required=request.cleaning_required,
            key_returned=request.key_returned,
            additional_charges=request.additional_charges,
            guest_comments=request.guest_comments,
            host_comments=request.host_comments
        )
        reservation = await service.perform_check_out(reservation_id, details)
        return _reservation_to_response(reservation)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.post("/api/reservations/{reservation_id}/cancel", response_model=ReservationResponse, tags=["Reservations"])
async def cancel_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(host_staff)
):
    """Cancel a confirmed reservation"""
    try:
        reservation = await service.cancel_reservation(reservation_id)
        return _reservation_to_response(reservation)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# ============================================================================
# BILLING ENDPOINTS
# ============================================================================

@app.post("/api/billing", response_model=BillingRecordResponse, status_code=201, tags=["Billing"])
async def create_billing(
    request: CreateBillingRequest,
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(gate_staff)
):
    """Create a billing record from a gate access"""
    try:
        record = await service.create_from_access(
            access_record_id=request.access_record_id,
            member_name=request.member_name,
            member_code=request.member_code,
            membership_type=request.membership_type,
            location=request.location,
            companions_count=request.companions_count,
            access_time=request.access_time or datetime.now(),
            gatekeeper_name=current_user.display_name,
            notes=request.notes
        )
        return _billing_to_response(record)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/api/billing", response_model=List[BillingRecordResponse], tags=["Billing"])
async def get_all_billing(
    limit: int = Query(50, ge=1, le=500),
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """All billing records, latest access first"""
    return [_billing_to_response(r) for r in await service.all_records(limit)]

@app.get("/api/billing/pending", response_model=List[BillingRecordResponse], tags=["Billing"])
async def get_pending_billing(
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """Charges waiting to be collected"""
    return [_billing_to_response(r) for r in await service.pending_records()]

@app.get("/api/billing/stats", response_model=BillingStatsResponse, tags=["Billing"])
async def get_billing_stats(
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """Dashboard counters for the host"""
    stats = await service.get_stats()
    return BillingStatsResponse(**stats.model_dump())

@app.get("/api/billing/pricing-rules", response_model=List[PricingRuleResponse], tags=["Billing"])
async def get_pricing_rules(
    location: Optional[Location] = None,
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(get_current_active_user)
):
    """Companion fee table"""
    return [
        PricingRuleResponse(
            location=rule.location.value,
            category=rule.category,
            description=rule.description,
            price=rule.price,
            conditions=rule.conditions
        )
        for rule in service.get_pricing_rules(location)
    ]

@app.get("/api/billing/{billing_id}", response_model=BillingRecordResponse, tags=["Billing"])
async def get_billing(
    billing_id: UUID,
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """Get billing record by ID"""
    try:
        record = await service.get_billing(billing_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _billing_to_response(record)

@app.post("/api/billing/{billing_id}/process", response_model=OperationResult, tags=["Billing"])
async def process_billing(
    billing_id: UUID,
    request: ProcessBillingRequest,
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """Mark a charge as collected"""
    try:
        success = await service.process_billing(billing_id, current_user.display_name, request.notes)
        return {"success": success}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@app.post("/api/billing/{billing_id}/cancel", response_model=OperationResult, tags=["Billing"])
async def cancel_billing(
    billing_id: UUID,
    request: CancelBillingRequest,
    service: BillingService = Depends(get_billing_service),
    current_user: User = Depends(host_staff)
):
    """Cancel a charge"""
    try:
        success = await service.cancel_billing(billing_id, current_user.display_name, request.reason)
        return {"success": success}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _user_to_response(user) -> UserResponse:
    """Convert User entity to UserResponse"""
    return UserResponse(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        role=user.role.value,
        disabled=user.disabled
    )

def _reservation_to_response(reservation) -> ReservationResponse:
    """Convert Reservation entity to ReservationResponse"""
    check_in = reservation.check_in_details
    check_out = reservation.check_out_details
    return ReservationResponse(
        reservation_id=reservation.reservation_id,
        reservation_code=reservation.reservation_code,
        guest_name=reservation.guest_name,
        guest_email=reservation.guest_email,
        guest_phone=reservation.guest_phone,
        accommodation_type=reservation.accommodation_type,
        accommodation_name=reservation.accommodation_name,
        location=reservation.location.value,
        check_in_date=reservation.check_in_date,
        check_out_date=reservation.check_out_date,
        number_of_guests=reservation.number_of_guests,
        total_amount=reservation.total_amount,
        status=reservation.status.value,
        special_requests=reservation.special_requests,
        check_in_details=CheckInDetailsResponse(
            checked_in_at=check_in.checked_in_at,
            checked_in_by=check_in.checked_in_by,
            actual_arrival_time=check_in.actual_arrival_time,
            guests_present=check_in.guests_present,
            documents_verified=check_in.documents_verified,
            key_provided=check_in.key_provided,
            notes=check_in.notes
        ) if check_in else None,
        check_out_details=CheckOutDetailsResponse(
            checked_out_at=check_out.checked_out_at,
            checked_out_by=check_out.checked_out_by,
            actual_departure_time=check_out.actual_departure_time,
            room_condition=check_out.room_condition.value,
            damages_reported=check_out.damages_reported,
            damage_description=check_out.damage_description,
            cleaning_required=check_out.cleaning_required,
            key_returned=check_out.key_returned,
            additional_charges=check_out.additional_charges,
            guest_comments=check_out.guest_comments,
            host_comments=check_out.host_comments
        ) if check_out else None,
        created_at=reservation.created_at,
        modified_at=reservation.modified_at,
        version=reservation.version
    )

def _billing_to_response(record) -> BillingRecordResponse:
    """Convert BillingRecord entity to BillingRecordResponse"""
    return BillingRecordResponse(
        billing_id=record.billing_id,
        access_record_id=record.access_record_id,
        member_name=record.member_name,
        member_code=record.member_code,
        membership_type=record.membership_type,
        location=record.location.value,
        companions_count=record.companions_count,
        access_time=record.access_time,
        gatekeeper_name=record.gatekeeper_name,
        status=record.status.value,
        billing_items=[
            BillingItemResponse(
                item_id=item.item_id,
                description=item.description,
                unit_price=item.unit_price,
                quantity=item.quantity,
                total=item.total,
                location=item.location.value,
                category=item.category
            )
            for item in record.billing_items
        ],
        total_amount=record.total_amount,
        notes=record.notes,
        processed_at=record.processed_at,
        processed_by=record.processed_by
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
