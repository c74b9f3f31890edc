from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import MessageResponse, UserRole
from residential_api.schemas.vehicles import VehicleCreateRequest
from residential_api.services.container import vehicle_service
from residential_api.utils.auth_dependencies import is_admin, require_roles
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/vehicles", tags=["Vehicles"])

get_vehicle_user = require_roles(UserRole.ADMIN, UserRole.RESIDENT, UserRole.SERVICE_PROVIDER)
get_vehicle_owner = require_roles(UserRole.RESIDENT, UserRole.SERVICE_PROVIDER)


def _ensure_owner_or_admin(vehicle: dict, user: dict) -> None:
    if is_admin(user):
        return
    owner_key = "resident_id" if user["role"] == UserRole.RESIDENT.value else "service_provider_id"
    if vehicle.get(owner_key) != user["id"]:
        logger.warning(f"[API] 403 Forbidden: {user['role']} {user['id']} on vehicle {vehicle['id']}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only access your own vehicles")


@router.get("")
async def list_vehicles(current_user: dict = Depends(get_vehicle_user)):
    """Residents and providers see their own vehicles, admins see all."""
    role = current_user["role"]
    vehicles = vehicle_service.list_vehicles(
        resident_id=current_user["id"] if role == UserRole.RESIDENT.value else None,
        service_provider_id=current_user["id"] if role == UserRole.SERVICE_PROVIDER.value else None,
    )
    return {"vehicles": vehicles}


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_vehicle(body: VehicleCreateRequest, current_user: dict = Depends(get_vehicle_owner)):
    data = body.model_dump()
    if current_user["role"] == UserRole.RESIDENT.value:
        vehicle = vehicle_service.create(data, resident=current_user)
    else:
        vehicle = vehicle_service.create(data, service_provider_id=current_user["id"])
    return {"message": "Vehicle registered successfully", "vehicle": vehicle}


@router.get("/{vehicle_id}/qr-code")
async def vehicle_qr_code(vehicle_id: str, current_user: dict = Depends(get_vehicle_user)):
    _ensure_owner_or_admin(vehicle_service.get(vehicle_id), current_user)
    return vehicle_service.qr_code(vehicle_id)


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(vehicle_id: str, current_user: dict = Depends(get_vehicle_user)):
    _ensure_owner_or_admin(vehicle_service.get(vehicle_id), current_user)
    vehicle_service.delete(vehicle_id)
    return MessageResponse(message="Vehicle deleted successfully")
