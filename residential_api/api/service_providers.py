from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import MessageResponse, PaginationParams, UserRole, pagination
from residential_api.schemas.service_providers import (
    ServiceProviderApprovalRequest,
    ServiceProviderUpdateRequest,
)
from residential_api.services.container import service_provider_service
from residential_api.utils.auth_dependencies import (
    ensure_self_or_admin,
    get_admin_or_service_provider,
    get_current_admin,
    get_current_user,
)
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Service provider directory
router = APIRouter(prefix="/api/service-providers", tags=["Service Providers"])


@router.get("")
async def list_service_providers(
    params: PaginationParams = Depends(pagination()),
    current_user: dict = Depends(get_current_user),
):
    providers, total = service_provider_service.list_providers(params)
    return {"service_providers": providers, "pagination": pagination_meta(params, total)}


@router.get("/categories/list")
async def list_categories():
    """Categories offered by ACTIVE providers. Public."""
    return {"categories": service_provider_service.categories()}


@router.get("/{provider_id}")
async def get_service_provider(provider_id: str, current_user: dict = Depends(get_current_user)):
    if current_user["role"] == UserRole.SERVICE_PROVIDER.value and current_user["id"] != provider_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own profile",
        )
    return {"service_provider": service_provider_service.get_detail(provider_id)}


@router.patch("/{provider_id}")
async def update_service_provider(
    provider_id: str,
    body: ServiceProviderUpdateRequest,
    current_user: dict = Depends(get_admin_or_service_provider),
):
    ensure_self_or_admin(current_user, provider_id, "You can only update your own profile")
    provider = service_provider_service.update(provider_id, body.model_dump(exclude_unset=True, exclude_none=True))
    return {"message": "Service provider updated successfully", "service_provider": provider}


@router.patch("/{provider_id}/approval")
async def set_service_provider_status(
    provider_id: str,
    body: ServiceProviderApprovalRequest,
    current_admin: dict = Depends(get_current_admin),
):
    provider = service_provider_service.set_status(provider_id, body.status)
    logger.info(f"[API] Provider {provider_id} -> {body.status} by admin {current_admin['id']}")
    return {
        "message": f"Service provider status updated to {body.status.lower()}",
        "service_provider": provider,
    }


@router.get("/{provider_id}/bookings")
async def list_provider_bookings(
    provider_id: str,
    params: PaginationParams = Depends(pagination()),
    current_user: dict = Depends(get_admin_or_service_provider),
):
    ensure_self_or_admin(current_user, provider_id, "You can only access your own bookings")
    bookings, total = service_provider_service.list_bookings(provider_id, params)
    return {"bookings": bookings, "pagination": pagination_meta(params, total)}


@router.get("/{provider_id}/qr-code")
async def service_provider_qr_code(
    provider_id: str,
    current_user: dict = Depends(get_admin_or_service_provider),
):
    ensure_self_or_admin(current_user, provider_id, "You can only access your own QR code")
    return service_provider_service.qr_code(provider_id)


@router.delete("/{provider_id}", response_model=MessageResponse)
async def delete_service_provider(provider_id: str, current_admin: dict = Depends(get_current_admin)):
    service_provider_service.delete(provider_id)
    return MessageResponse(message="Service provider deleted successfully")
