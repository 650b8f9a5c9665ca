from fastapi import APIRouter

from . import appointments, auth, consultations, emergency, medical_records, reports, users

api_router = APIRouter(prefix="/api/v1")

for module in (auth, users, appointments, medical_records, consultations, emergency, reports):
    api_router.include_router(module.router)
