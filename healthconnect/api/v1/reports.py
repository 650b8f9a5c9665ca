from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from ...core.errors import NotFoundError
from ...api.deps import get_current_principal
from ...domain.policy import Principal
from ...services.placeholders import ReportService, get_report_service

router = APIRouter(prefix="/reports", tags=["Reports"])

@router.get("")
async def list_reports(
    principal: Principal = Depends(get_current_principal),
    service: ReportService = Depends(get_report_service)
):
    """Reports submitted by the caller."""
    reports = service.list_for(principal)
    return {"success": True, "count": len(reports), "reports": reports}

@router.get("/{report_id}")
async def get_report(
    report_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ReportService = Depends(get_report_service)
):
    report = service.get(principal, report_id)
    if report is None:
        raise NotFoundError("Report not found")
    return {"success": True, "report": report}

@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_report(
    payload: Dict[str, Any] = Body(default={}),
    principal: Principal = Depends(get_current_principal),
    service: ReportService = Depends(get_report_service)
):
    report_id = service.submit(principal, payload)
    return {"success": True, "message": "Report submitted successfully", "report_id": report_id}

@router.put("/{report_id}")
async def update_report(
    report_id: str,
    payload: Dict[str, Any] = Body(default={}),
    principal: Principal = Depends(get_current_principal),
    service: ReportService = Depends(get_report_service)
):
    service.update(principal, report_id, payload)
    return {"success": True, "message": "Report updated successfully"}
