from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import UserRole
from residential_api.schemas.deliveries import DeliveryCreateRequest, DeliveryStatusRequest
from residential_api.services.container import delivery_service, resident_service
from residential_api.utils.auth_dependencies import ensure_self_or_admin, get_admin_or_resident, is_admin

router = APIRouter(prefix="/api/deliveries", tags=["Deliveries"])


@router.get("")
async def list_deliveries(current_user: dict = Depends(get_admin_or_resident)):
    resident_id = current_user["id"] if current_user["role"] == UserRole.RESIDENT.value else None
    return {"deliveries": delivery_service.list_deliveries(resident_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_delivery(body: DeliveryCreateRequest, current_user: dict = Depends(get_admin_or_resident)):
    if is_admin(current_user):
        if not body.resident_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Admin must specify resident_id when creating deliveries",
            )
        host = resident_service.get(body.resident_id)
    else:
        host = current_user
    delivery = delivery_service.create(host, body.model_dump())
    return {"message": "Delivery registered successfully", "delivery": delivery}


@router.patch("/{delivery_id}/status")
async def set_delivery_status(
    delivery_id: str,
    body: DeliveryStatusRequest,
    current_user: dict = Depends(get_admin_or_resident),
):
    delivery = delivery_service.get(delivery_id)
    ensure_self_or_admin(current_user, delivery["resident_id"], "You can only update your own deliveries")
    delivery = delivery_service.set_status(delivery_id, body.status)
    return {"message": f"Delivery status updated to {body.status.lower()}", "delivery": delivery}
