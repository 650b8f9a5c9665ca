"""
Stand-in collaborators for consultations, emergency services and reports.

None of these domains has storage or an external provider yet. Each service
keeps the route signatures stable: reads come back empty, writes are
acknowledged with a reference id and nothing is kept.
"""

from typing import Any, Dict, List, Optional
import logging
import secrets
import time

from ..domain.policy import Principal

logger = logging.getLogger(__name__)

def new_reference(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}"

class ConsultationService:
    def list_for(self, principal: Principal) -> List[Dict[str, Any]]:
        return []

    def get(self, principal: Principal, consultation_id: str) -> Optional[Dict[str, Any]]:
        return None

    def create(self, principal: Principal, payload: Dict[str, Any]) -> str:
        reference = new_reference("cons")
        logger.info(f"Consultation {reference} requested by user {principal.id} (not persisted)")
        return reference

    def update(self, principal: Principal, consultation_id: str, payload: Dict[str, Any]) -> None:
        return None

    def start_session(self, principal: Principal, consultation_id: str) -> Dict[str, str]:
        # No video provider is wired in; the token only identifies the session
        return {
            "session_id": new_reference("sess"),
            "token": secrets.token_urlsafe(24),
        }

    def end_session(self, principal: Principal, consultation_id: str) -> None:
        return None

class EmergencyService:
    def nearby_facilities(self, principal: Principal) -> List[Dict[str, Any]]:
        return []

    def blood_banks(self, principal: Principal) -> List[Dict[str, Any]]:
        return []

    def oxygen_suppliers(self, principal: Principal) -> List[Dict[str, Any]]:
        return []

    def request_assistance(self, principal: Principal, payload: Dict[str, Any]) -> str:
        reference = new_reference("emer")
        logger.warning(f"Emergency assistance {reference} requested by user {principal.id}; no responder is configured")
        return reference

class ReportService:
    def list_for(self, principal: Principal) -> List[Dict[str, Any]]:
        return []

    def get(self, principal: Principal, report_id: str) -> Optional[Dict[str, Any]]:
        return None

    def submit(self, principal: Principal, payload: Dict[str, Any]) -> str:
        return new_reference("rep")

    def update(self, principal: Principal, report_id: str, payload: Dict[str, Any]) -> None:
        return None

def get_consultation_service() -> ConsultationService:
    return ConsultationService()

def get_emergency_service() -> EmergencyService:
    return EmergencyService()

def get_report_service() -> ReportService:
    return ReportService()
