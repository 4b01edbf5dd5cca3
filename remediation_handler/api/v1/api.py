# remediation_handler/api/v1/api.py
from fastapi import APIRouter
from remediation_handler.api.v1.endpoints import remediation

api_router = APIRouter()

# Include routers from endpoint modules
api_router.include_router(remediation.router, prefix="/remediation", tags=["Remediation"])
