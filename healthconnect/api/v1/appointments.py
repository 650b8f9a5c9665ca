from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from ...core.database import get_db
from ...core.errors import ValidationError
from ...api.deps import get_current_principal, require_permission
from ...domain.policy import Action, Principal
from ...models.appointment import AppointmentStatus
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentUpdate, AppointmentResponse,
    AppointmentEnvelope, AppointmentListResponse,
    AvailabilityResponse, TimeSlotResponse
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("", response_model=AppointmentListResponse)
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Appointments where the caller is the patient or the doctor (all of them for admins)."""
    appointments = AppointmentService(db).list_for(principal, status_filter, start_date, end_date)

    return AppointmentListResponse(
        count=len(appointments),
        appointments=[AppointmentResponse.from_orm(a) for a in appointments],
    )

# Declared before /{appointment_id} so the literal path wins
@router.get("/availability", response_model=AvailabilityResponse)
async def doctor_availability(
    doctor_id: Optional[int] = None,
    on_date: Optional[date] = Query(None, alias="date"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Free slots in the daily catalog for one doctor on one day."""
    if doctor_id is None or on_date is None:
        raise ValidationError("Doctor ID and date are required")

    slots = AppointmentService(db).availability(doctor_id, on_date)

    return AvailabilityResponse(
        doctor_id=doctor_id,
        date=on_date,
        available_slots=[TimeSlotResponse.from_orm(slot) for slot in slots],
    )

@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
async def get_appointment(
    appointment_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).get(principal, appointment_id)
    return AppointmentEnvelope(appointment=AppointmentResponse.from_orm(appointment))

@router.post("", response_model=AppointmentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    principal: Principal = Depends(require_permission(Action.CREATE_APPOINTMENT)),
    db: Session = Depends(get_db)
):
    """Book an appointment (patients, or admins on a patient's behalf)."""
    appointment = AppointmentService(db).create(principal, appointment_data)

    return AppointmentEnvelope(
        message="Appointment scheduled successfully",
        appointment=AppointmentResponse.from_orm(appointment),
    )

@router.put("/{appointment_id}", response_model=AppointmentEnvelope)
async def update_appointment(
    appointment_id: int,
    appointment_data: AppointmentUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).update(principal, appointment_id, appointment_data)

    return AppointmentEnvelope(
        message="Appointment updated successfully",
        appointment=AppointmentResponse.from_orm(appointment),
    )

@router.patch("/{appointment_id}/cancel", response_model=AppointmentEnvelope)
async def cancel_appointment(
    appointment_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Cancel an appointment; cancelling twice is harmless."""
    appointment = AppointmentService(db).cancel(principal, appointment_id)

    return AppointmentEnvelope(
        message="Appointment cancelled successfully",
        appointment=AppointmentResponse.from_orm(appointment),
    )
