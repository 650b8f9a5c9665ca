from sqlalchemy.orm import Session, joinedload
from datetime import date
from typing import List, Optional
import logging

from ..core.errors import AuthorizationError, NotFoundError, ValidationError
from ..core.security import UserRole
from ..domain.availability import DAILY_CATALOG, TimeSlot, available_slots
from ..domain.policy import Action, Principal, ResourceOwners, can_access
from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def list_for(
        self,
        principal: Principal,
        status: Optional[AppointmentStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Appointment]:
        """Appointments visible to the principal, oldest first."""
        query = self._query()

        if principal.role == UserRole.PATIENT:
            query = query.filter(Appointment.patient_id == principal.id)
        elif principal.role == UserRole.DOCTOR:
            query = query.filter(Appointment.doctor_id == principal.id)

        if status:
            query = query.filter(Appointment.status == status)

        # The range only applies when both ends are given
        if start_date and end_date:
            query = query.filter(
                Appointment.date >= start_date,
                Appointment.date <= end_date,
            )

        return query.order_by(Appointment.date, Appointment.start_time).all()

    def get(self, principal: Principal, appointment_id: int) -> Appointment:
        return self._get_authorized(
            principal, appointment_id, Action.READ,
            "Not authorized to access this appointment"
        )

    def create(self, principal: Principal, data: AppointmentCreate) -> Appointment:
        self._get_user_with_role(data.doctor_id, UserRole.DOCTOR, "Doctor not found")

        patient_id = principal.id
        if principal.role == UserRole.ADMIN and data.patient_id is not None:
            self._get_user_with_role(data.patient_id, UserRole.PATIENT, "Patient not found")
            patient_id = data.patient_id

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=data.doctor_id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            type=data.type,
            reason=data.reason,
            status=AppointmentStatus.SCHEDULED,
        )

        self.db.add(appointment)
        self.db.commit()

        logger.info(
            f"Appointment {appointment.id} booked with doctor {appointment.doctor_id} "
            f"on {appointment.date} {appointment.start_time}-{appointment.end_time}"
        )
        return self._reload(appointment.id)

    def update(self, principal: Principal, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        appointment = self._get_authorized(
            principal, appointment_id, Action.UPDATE,
            "Not authorized to update this appointment"
        )

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        new_status = changes.get("status")
        if (
            appointment.status == AppointmentStatus.CANCELLED
            and new_status is not None
            and new_status != AppointmentStatus.CANCELLED
        ):
            raise ValidationError("A cancelled appointment cannot be reopened")

        start_time = changes.get("start_time", appointment.start_time)
        end_time = changes.get("end_time", appointment.end_time)
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time")

        for field, value in changes.items():
            setattr(appointment, field, value)

        self.db.commit()
        return self._reload(appointment.id)

    def cancel(self, principal: Principal, appointment_id: int) -> Appointment:
        appointment = self._get_authorized(
            principal, appointment_id, Action.CANCEL,
            "Not authorized to cancel this appointment"
        )

        if appointment.status != AppointmentStatus.CANCELLED:
            appointment.status = AppointmentStatus.CANCELLED
            self.db.commit()
            logger.info(f"Appointment {appointment.id} cancelled by user {principal.id}")

        return appointment

    def availability(self, doctor_id: int, on_date: date) -> List[TimeSlot]:
        """Open catalog slots for a doctor on one day."""
        self._get_user_with_role(doctor_id, UserRole.DOCTOR, "Doctor not found")

        bookings = self.db.query(Appointment.start_time, Appointment.end_time).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date == on_date,
            Appointment.status != AppointmentStatus.CANCELLED,
        ).all()

        booked = [TimeSlot(start_time=start, end_time=end) for start, end in bookings]
        return available_slots(DAILY_CATALOG, booked)

    def _query(self):
        return self.db.query(Appointment).options(
            joinedload(Appointment.patient),
            joinedload(Appointment.doctor),
        )

    def _reload(self, appointment_id: int) -> Appointment:
        return self._query().filter(Appointment.id == appointment_id).first()

    def _get_authorized(self, principal: Principal, appointment_id: int, action: Action, denial: str) -> Appointment:
        appointment = self._reload(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        owners = ResourceOwners(patient_id=appointment.patient_id, doctor_id=appointment.doctor_id)
        if not can_access(principal, owners, action):
            raise AuthorizationError(denial)

        return appointment

    def _get_user_with_role(self, user_id: int, role: UserRole, missing: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user or user.role != role:
            raise NotFoundError(missing)
        return user
