from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)

    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Authoring doctor; writes are restricted to this user and admins
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    record_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False, server_default=func.now())
    description = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=False, default=list)
    is_private = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    def __repr__(self):
        return f"<MedicalRecord(id={self.id}, patient_id={self.patient_id}, title='{self.title}')>"
