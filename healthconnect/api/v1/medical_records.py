from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_clinician, get_current_principal, require_permission
from ...domain.policy import Action, Principal
from ...services.medical_record_service import MedicalRecordService
from ...schemas.common import MessageResponse
from ...schemas.medical_record import (
    MedicalRecordCreate, MedicalRecordUpdate, MedicalRecordResponse,
    MedicalRecordEnvelope, MedicalRecordListResponse
)

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])

def _listing(records) -> MedicalRecordListResponse:
    return MedicalRecordListResponse(
        count=len(records),
        medical_records=[MedicalRecordResponse.from_orm(r) for r in records],
    )

@router.get("", response_model=MedicalRecordListResponse)
async def list_medical_records(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Own records for patients, authored records for doctors, everything for admins."""
    return _listing(MedicalRecordService(db).list_for(principal))

@router.get("/patient/{patient_id}", response_model=MedicalRecordListResponse)
async def list_patient_medical_records(
    patient_id: int,
    principal: Principal = Depends(get_clinician),
    db: Session = Depends(get_db)
):
    return _listing(MedicalRecordService(db).list_for_patient(principal, patient_id))

@router.get("/{record_id}", response_model=MedicalRecordEnvelope)
async def get_medical_record(
    record_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    record = MedicalRecordService(db).get(principal, record_id)
    return MedicalRecordEnvelope(medical_record=MedicalRecordResponse.from_orm(record))

@router.post("", response_model=MedicalRecordEnvelope, status_code=status.HTTP_201_CREATED)
async def create_medical_record(
    record_data: MedicalRecordCreate,
    principal: Principal = Depends(require_permission(Action.CREATE_MEDICAL_RECORD)),
    db: Session = Depends(get_db)
):
    record = MedicalRecordService(db).create(principal, record_data)

    return MedicalRecordEnvelope(
        message="Medical record created successfully",
        medical_record=MedicalRecordResponse.from_orm(record),
    )

@router.put("/{record_id}", response_model=MedicalRecordEnvelope)
async def update_medical_record(
    record_id: int,
    record_data: MedicalRecordUpdate,
    principal: Principal = Depends(get_clinician),
    db: Session = Depends(get_db)
):
    record = MedicalRecordService(db).update(principal, record_id, record_data)

    return MedicalRecordEnvelope(
        message="Medical record updated successfully",
        medical_record=MedicalRecordResponse.from_orm(record),
    )

@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_medical_record(
    record_id: int,
    principal: Principal = Depends(get_clinician),
    db: Session = Depends(get_db)
):
    MedicalRecordService(db).delete(principal, record_id)
    return MessageResponse(message="Medical record deleted successfully")
