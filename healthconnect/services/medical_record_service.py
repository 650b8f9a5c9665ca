from sqlalchemy.orm import Session, joinedload
from datetime import datetime
from typing import List
import logging

from ..core.errors import AuthorizationError, NotFoundError
from ..core.security import UserRole
from ..domain.policy import Action, Principal, ResourceOwners, can_access
from ..models.medical_record import MedicalRecord
from ..models.user import User
from ..schemas.medical_record import MedicalRecordCreate, MedicalRecordUpdate

logger = logging.getLogger(__name__)

class MedicalRecordService:
    def __init__(self, db: Session):
        self.db = db

    def list_for(self, principal: Principal) -> List[MedicalRecord]:
        """Records the principal takes part in, newest first."""
        query = self._query()

        if principal.role == UserRole.PATIENT:
            query = query.filter(MedicalRecord.patient_id == principal.id)
        elif principal.role == UserRole.DOCTOR:
            query = query.filter(MedicalRecord.doctor_id == principal.id)

        return query.order_by(MedicalRecord.date.desc()).all()

    def list_for_patient(self, principal: Principal, patient_id: int) -> List[MedicalRecord]:
        """A patient's records, narrowed to the ones the principal may read."""
        records = self._query().filter(
            MedicalRecord.patient_id == patient_id
        ).order_by(MedicalRecord.date.desc()).all()

        return [
            record for record in records
            if can_access(principal, self._readers(record), Action.READ)
        ]

    def get(self, principal: Principal, record_id: int) -> MedicalRecord:
        record = self._load(record_id)
        if not can_access(principal, self._readers(record), Action.READ):
            raise AuthorizationError("Not authorized to access this medical record")
        return record

    def create(self, principal: Principal, data: MedicalRecordCreate) -> MedicalRecord:
        self._get_user_with_role(data.patient_id, UserRole.PATIENT, "Patient not found")

        doctor_id = principal.id
        if principal.role == UserRole.ADMIN and data.doctor_id is not None:
            self._get_user_with_role(data.doctor_id, UserRole.DOCTOR, "Doctor not found")
            doctor_id = data.doctor_id

        record = MedicalRecord(
            patient_id=data.patient_id,
            doctor_id=doctor_id,
            record_type=data.record_type,
            title=data.title,
            date=data.date or datetime.utcnow(),
            description=data.description,
            attachments=list(data.attachments),
            is_private=data.is_private,
        )

        self.db.add(record)
        self.db.commit()

        logger.info(f"Medical record {record.id} filed for patient {record.patient_id} by user {principal.id}")
        return self._load(record.id)

    def update(self, principal: Principal, record_id: int, data: MedicalRecordUpdate) -> MedicalRecord:
        record = self._load(record_id)
        if not can_access(principal, self._writers(record), Action.UPDATE):
            raise AuthorizationError("Not authorized to update this medical record")

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(record, field, value)

        self.db.commit()
        return self._load(record.id)

    def delete(self, principal: Principal, record_id: int) -> None:
        record = self._load(record_id)
        if not can_access(principal, self._writers(record), Action.DELETE):
            raise AuthorizationError("Not authorized to delete this medical record")

        self.db.delete(record)
        self.db.commit()

        logger.info(f"Medical record {record_id} deleted by user {principal.id}")

    @staticmethod
    def _readers(record: MedicalRecord) -> ResourceOwners:
        return ResourceOwners(patient_id=record.patient_id, doctor_id=record.doctor_id)

    @staticmethod
    def _writers(record: MedicalRecord) -> ResourceOwners:
        # The patient owns the record for reading only
        return ResourceOwners(doctor_id=record.doctor_id)

    def _query(self):
        return self.db.query(MedicalRecord).options(
            joinedload(MedicalRecord.patient),
            joinedload(MedicalRecord.doctor),
        )

    def _load(self, record_id: int) -> MedicalRecord:
        record = self._query().filter(MedicalRecord.id == record_id).first()
        if not record:
            raise NotFoundError("Medical record not found")
        return record

    def _get_user_with_role(self, user_id: int, role: UserRole, missing: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user or user.role != role:
            raise NotFoundError(missing)
        return user
