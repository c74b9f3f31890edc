from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import MessageResponse, PaginationParams, UserRole, pagination
from residential_api.schemas.guests import GuestCreateRequest, GuestStatusRequest
from residential_api.services.container import guest_service, resident_service
from residential_api.utils.auth_dependencies import (
    ensure_self_or_admin,
    get_admin_or_resident,
    get_current_admin,
    is_admin,
)
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Guest pre-registration
router = APIRouter(prefix="/api/guests", tags=["Guests"])


@router.get("")
async def list_guests(
    params: PaginationParams = Depends(pagination()),
    current_user: dict = Depends(get_admin_or_resident),
):
    resident_id = current_user["id"] if current_user["role"] == UserRole.RESIDENT.value else None
    guests, total = guest_service.list_guests(params, resident_id=resident_id)
    return {"guests": guests, "pagination": pagination_meta(params, total)}


@router.get("/stats/overview")
async def guest_stats(current_admin: dict = Depends(get_current_admin)):
    return guest_service.stats_overview()


@router.get("/resident/{resident_id}")
async def resident_guests(resident_id: str, current_user: dict = Depends(get_admin_or_resident)):
    """All guests of a resident; guests whose visit window has passed are expired."""
    ensure_self_or_admin(current_user, resident_id, "You can only access your own guests")
    return guest_service.resident_guests(resident_id)


@router.get("/{guest_id}")
async def get_guest(guest_id: str, current_user: dict = Depends(get_admin_or_resident)):
    guest = guest_service.get(guest_id)
    ensure_self_or_admin(current_user, guest["resident_id"], "You can only access your own guests")
    return {"guest": guest}


@router.get("/{guest_id}/qr-code")
async def guest_qr_code(guest_id: str, current_user: dict = Depends(get_admin_or_resident)):
    guest = guest_service.get(guest_id)
    ensure_self_or_admin(current_user, guest["resident_id"], "You can only access your own guests' QR codes")
    return {
        "qr_code": guest["qr_code"],
        "guest": {
            "id": guest["id"],
            "guest_name": guest["guest_name"],
            "visit_date": guest["visit_date"],
            "time_from": guest["time_from"],
            "time_to": guest["time_to"],
            "status": guest["status"],
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_guest(body: GuestCreateRequest, current_user: dict = Depends(get_admin_or_resident)):
    """
    Residents register guests for themselves; admins must name the host
    resident with resident_id.
    """
    if is_admin(current_user):
        if not body.resident_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Admin must specify resident_id when creating guests",
            )
        host = resident_service.get(body.resident_id)
    else:
        host = current_user
    guest = guest_service.create(host, body.model_dump())
    return {"message": "Guest registered successfully", "guest": guest, "qr_code": guest["qr_code"]}


@router.patch("/{guest_id}/status")
async def set_guest_status(
    guest_id: str,
    body: GuestStatusRequest,
    current_user: dict = Depends(get_admin_or_resident),
):
    guest = guest_service.get(guest_id)
    ensure_self_or_admin(current_user, guest["resident_id"], "You can only update your own guests")
    guest = guest_service.set_status(guest_id, body.status)
    return {"message": f"Guest status updated to {body.status.lower()}", "guest": guest}


@router.delete("/{guest_id}", response_model=MessageResponse)
async def delete_guest(guest_id: str, current_user: dict = Depends(get_admin_or_resident)):
    guest = guest_service.get(guest_id)
    ensure_self_or_admin(current_user, guest["resident_id"], "You can only delete your own guests")
    guest_service.delete(guest_id)
    return MessageResponse(message="Guest deleted successfully")
