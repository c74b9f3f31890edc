from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.common import UserRole
from residential_api.schemas.complaints import ComplaintCreateRequest, ComplaintUpdateRequest
from residential_api.services.container import complaint_service
from residential_api.utils.auth_dependencies import (
    get_admin_or_resident,
    get_current_admin,
    get_current_resident,
)

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])


@router.get("")
async def list_complaints(current_user: dict = Depends(get_admin_or_resident)):
    """Newest first. Residents only see their own."""
    resident_id = current_user["id"] if current_user["role"] == UserRole.RESIDENT.value else None
    return {"complaints": complaint_service.list_complaints(resident_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def file_complaint(body: ComplaintCreateRequest, current_resident: dict = Depends(get_current_resident)):
    complaint = complaint_service.create(current_resident["id"], body.model_dump())
    return {"message": "Complaint submitted successfully", "complaint": complaint}


@router.patch("/{complaint_id}")
async def update_complaint(
    complaint_id: str,
    body: ComplaintUpdateRequest,
    current_admin: dict = Depends(get_current_admin),
):
    if body.status is None and not body.admin_response:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide a status or an admin response",
        )
    complaint = complaint_service.update(complaint_id, body.status, body.admin_response)
    return {"message": "Complaint updated successfully", "complaint": complaint}
