from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from ...core.errors import NotFoundError
from ...api.deps import get_current_principal
from ...domain.policy import Principal
from ...services.placeholders import ConsultationService, get_consultation_service

router = APIRouter(prefix="/consultations", tags=["Consultations"])

@router.get("")
async def list_consultations(
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    consultations = service.list_for(principal)
    return {"success": True, "count": len(consultations), "consultations": consultations}

@router.get("/{consultation_id}")
async def get_consultation(
    consultation_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    consultation = service.get(principal, consultation_id)
    if consultation is None:
        raise NotFoundError("Consultation not found")
    return {"success": True, "consultation": consultation}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_consultation(
    payload: Dict[str, Any] = Body(default={}),
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    consultation_id = service.create(principal, payload)
    return {"success": True, "message": "Consultation created successfully", "consultation_id": consultation_id}

@router.put("/{consultation_id}")
async def update_consultation(
    consultation_id: str,
    payload: Dict[str, Any] = Body(default={}),
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    service.update(principal, consultation_id, payload)
    return {"success": True, "message": "Consultation updated successfully"}

@router.post("/{consultation_id}/start")
async def start_video_consultation(
    consultation_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    session = service.start_session(principal, consultation_id)
    return {"success": True, "message": "Video consultation started", **session}

@router.post("/{consultation_id}/end")
async def end_video_consultation(
    consultation_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ConsultationService = Depends(get_consultation_service)
):
    service.end_session(principal, consultation_id)
    return {"success": True, "message": "Video consultation ended"}
