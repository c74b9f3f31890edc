from fastapi import APIRouter, Depends

from residential_api.schemas.common import MessageResponse, PaginationParams, pagination
from residential_api.schemas.residents import ResidentApprovalRequest, ResidentUpdateRequest
from residential_api.services.container import resident_service
from residential_api.utils.auth_dependencies import (
    ensure_self_or_admin,
    get_admin_or_resident,
    get_current_admin,
)
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Resident registry (admin) and self-service profile (resident)
router = APIRouter(prefix="/api/residents", tags=["Residents"])


@router.get("")
async def list_residents(
    params: PaginationParams = Depends(pagination()),
    current_admin: dict = Depends(get_current_admin),
):
    residents, total = resident_service.list_residents(params)
    return {"residents": residents, "pagination": pagination_meta(params, total)}


@router.get("/stats/overview")
async def resident_stats(current_admin: dict = Depends(get_current_admin)):
    return {"statistics": resident_service.stats_overview()}


@router.get("/{resident_id}")
async def get_resident(resident_id: str, current_user: dict = Depends(get_admin_or_resident)):
    """Resident with vehicles and latest complaints, bookings and bills."""
    ensure_self_or_admin(current_user, resident_id, "You can only access your own profile")
    return {"resident": resident_service.get_detail(resident_id)}


@router.patch("/{resident_id}")
async def update_resident(
    resident_id: str,
    body: ResidentUpdateRequest,
    current_user: dict = Depends(get_admin_or_resident),
):
    ensure_self_or_admin(current_user, resident_id, "You can only update your own profile")
    resident = resident_service.update(resident_id, body.model_dump(exclude_unset=True, exclude_none=True))
    logger.info(f"[API] Resident {resident_id} updated by {current_user['role']} {current_user['id']}")
    return {"message": "Resident updated successfully", "resident": resident}


@router.patch("/{resident_id}/approval")
async def set_resident_approval(
    resident_id: str,
    body: ResidentApprovalRequest,
    current_admin: dict = Depends(get_current_admin),
):
    resident = resident_service.set_approval(resident_id, body.approval_status)
    return {
        "message": f"Resident {body.approval_status.lower()} successfully",
        "resident": resident,
    }


@router.get("/{resident_id}/qr-code")
async def resident_qr_code(resident_id: str, current_user: dict = Depends(get_admin_or_resident)):
    ensure_self_or_admin(current_user, resident_id, "You can only access your own QR code")
    return resident_service.qr_code(resident_id)


@router.delete("/{resident_id}", response_model=MessageResponse)
async def delete_resident(resident_id: str, current_admin: dict = Depends(get_current_admin)):
    resident_service.delete(resident_id)
    return MessageResponse(message="Resident deleted successfully")
