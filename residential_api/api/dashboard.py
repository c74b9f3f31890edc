from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import UserRole
from residential_api.services.container import dashboard_service
from residential_api.utils.auth_dependencies import get_current_admin, get_current_user

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/admin/stats")
async def admin_dashboard(current_admin: dict = Depends(get_current_admin)):
    return dashboard_service.admin_stats()


@router.get("/resident/stats")
async def resident_dashboard(current_user: dict = Depends(get_current_user)):
    if current_user["role"] != UserRole.RESIDENT.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This endpoint is for residents only")
    return dashboard_service.resident_stats(current_user["id"])


@router.get("/service-provider/stats")
async def service_provider_dashboard(current_user: dict = Depends(get_current_user)):
    if current_user["role"] != UserRole.SERVICE_PROVIDER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This endpoint is for service providers only",
        )
    return dashboard_service.service_provider_stats(current_user["id"])
