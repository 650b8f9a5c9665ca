from pydantic import BaseModel, Field, model_validator
from datetime import date as date_type, datetime
from typing import List, Optional

from ..models.appointment import AppointmentStatus
from .auth import UserSummary
from .common import Envelope

# 24-hour "HH:MM"; zero-padded so string order matches time order
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class AppointmentCreate(BaseModel):
    doctor_id: int
    date: date_type
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    type: Optional[str] = Field("in-person", max_length=50)
    reason: Optional[str] = None
    # Only honoured when an admin books on a patient's behalf
    patient_id: Optional[int] = None

    @model_validator(mode="after")
    def check_time_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

class AppointmentUpdate(BaseModel):
    date: Optional[date_type] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    type: Optional[str] = Field(None, max_length=50)
    reason: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    patient: Optional[UserSummary] = None
    doctor: Optional[UserSummary] = None
    date: date_type
    start_time: str
    end_time: str
    type: Optional[str] = None
    reason: Optional[str] = None
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AppointmentEnvelope(Envelope):
    appointment: AppointmentResponse

class AppointmentListResponse(Envelope):
    count: int
    appointments: List[AppointmentResponse]

class TimeSlotResponse(BaseModel):
    start_time: str
    end_time: str

    class Config:
        from_attributes = True

class AvailabilityResponse(Envelope):
    doctor_id: int
    date: date_type
    available_slots: List[TimeSlotResponse]
