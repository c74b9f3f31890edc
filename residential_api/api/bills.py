from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.bills import BillStatusRequest, GenerateBillsRequest
from residential_api.schemas.common import MessageResponse, PaginationParams, UserRole, pagination
from residential_api.services.container import bill_service
from residential_api.utils.auth_dependencies import (
    ensure_self_or_admin,
    get_admin_or_resident,
    get_current_admin,
    is_admin,
)
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Maintenance billing
router = APIRouter(prefix="/api/maintenance-bills", tags=["Maintenance Bills"])


@router.get("")
async def list_bills(
    params: PaginationParams = Depends(pagination()),
    current_user: dict = Depends(get_admin_or_resident),
):
    resident_id = current_user["id"] if current_user["role"] == UserRole.RESIDENT.value else None
    bills, total = bill_service.list_bills(params, resident_id=resident_id)
    return {"bills": bills, "pagination": pagination_meta(params, total)}


@router.get("/stats/overview")
async def bill_stats(current_admin: dict = Depends(get_current_admin)):
    return bill_service.stats_overview()


@router.get("/resident/{resident_id}")
async def resident_bills(resident_id: str, current_user: dict = Depends(get_admin_or_resident)):
    ensure_self_or_admin(current_user, resident_id, "You can only access your own bills")
    return bill_service.resident_bills(resident_id)


@router.get("/{bill_id}")
async def get_bill(bill_id: str, current_user: dict = Depends(get_admin_or_resident)):
    bill = bill_service.get(bill_id)
    ensure_self_or_admin(current_user, bill["resident_id"], "You can only access your own bills")
    return {"bill": bill}


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_bills(body: GenerateBillsRequest, current_admin: dict = Depends(get_current_admin)):
    """
    Generate bills for the given (or all) active, approved residents.
    Residents already billed for the month are skipped.
    """
    result = bill_service.generate(body.bill_data.model_dump(), body.resident_ids)
    logger.info(f"[API] Admin {current_admin['id']} generated {len(result['bills'])} bills")
    return {
        "message": f"Successfully generated {len(result['bills'])} maintenance bills",
        "bills": result["bills"],
        "skipped": result["skipped"],
    }


@router.patch("/{bill_id}/status")
async def update_bill_status(
    bill_id: str,
    body: BillStatusRequest,
    current_admin: dict = Depends(get_current_admin),
):
    if body.status is None and body.paid_date is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide a status or a paid date")
    bill = bill_service.update_status(bill_id, body.status, body.paid_date)
    return {"message": "Bill status updated successfully", "bill": bill}


@router.patch("/{bill_id}/mark-paid")
async def mark_bill_paid(bill_id: str, current_user: dict = Depends(get_admin_or_resident)):
    """Admins settle the bill; residents send a payment notification."""
    bill = bill_service.get(bill_id)
    ensure_self_or_admin(current_user, bill["resident_id"], "You can only mark your own bills as paid")
    return bill_service.mark_paid(bill_id, by_admin=is_admin(current_user))


@router.delete("/{bill_id}", response_model=MessageResponse)
async def delete_bill(bill_id: str, current_admin: dict = Depends(get_current_admin)):
    bill_service.delete(bill_id)
    return MessageResponse(message="Bill deleted successfully")
