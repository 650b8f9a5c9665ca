from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from ...api.deps import get_current_principal
from ...domain.policy import Principal
from ...services.placeholders import EmergencyService, get_emergency_service

router = APIRouter(prefix="/emergency", tags=["Emergency"])

@router.get("/facilities/nearby")
async def nearby_facilities(
    principal: Principal = Depends(get_current_principal),
    service: EmergencyService = Depends(get_emergency_service)
):
    facilities = service.nearby_facilities(principal)
    return {"success": True, "count": len(facilities), "facilities": facilities}

@router.get("/blood-banks")
async def blood_banks(
    principal: Principal = Depends(get_current_principal),
    service: EmergencyService = Depends(get_emergency_service)
):
    banks = service.blood_banks(principal)
    return {"success": True, "count": len(banks), "blood_banks": banks}

@router.get("/oxygen-suppliers")
async def oxygen_suppliers(
    principal: Principal = Depends(get_current_principal),
    service: EmergencyService = Depends(get_emergency_service)
):
    suppliers = service.oxygen_suppliers(principal)
    return {"success": True, "count": len(suppliers), "oxygen_suppliers": suppliers}

@router.post("/assistance")
async def request_assistance(
    payload: Dict[str, Any] = Body(default={}),
    principal: Principal = Depends(get_current_principal),
    service: EmergencyService = Depends(get_emergency_service)
):
    request_id = service.request_assistance(principal, payload)
    return {"success": True, "message": "Emergency assistance request received", "request_id": request_id}
