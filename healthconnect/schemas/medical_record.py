from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from .auth import UserSummary
from .common import Envelope

class MedicalRecordCreate(BaseModel):
    patient_id: int
    record_type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    date: Optional[datetime] = None
    description: Optional[str] = None
    attachments: List[str] = []
    is_private: bool = False
    # Only honoured when an admin files a record for a doctor
    doctor_id: Optional[int] = None

class MedicalRecordUpdate(BaseModel):
    record_type: Optional[str] = Field(None, min_length=1, max_length=50)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    description: Optional[str] = None
    attachments: Optional[List[str]] = None
    is_private: Optional[bool] = None

class MedicalRecordResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    patient: Optional[UserSummary] = None
    doctor: Optional[UserSummary] = None
    record_type: str
    title: str
    date: datetime
    description: Optional[str] = None
    attachments: List[str] = []
    is_private: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MedicalRecordEnvelope(Envelope):
    medical_record: MedicalRecordResponse

class MedicalRecordListResponse(Envelope):
    count: int
    medical_records: List[MedicalRecordResponse]
