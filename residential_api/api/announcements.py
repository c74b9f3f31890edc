from fastapi import APIRouter, Depends, status

from residential_api.schemas.announcements import AnnouncementCreateRequest
from residential_api.schemas.common import MessageResponse
from residential_api.services.container import announcement_service
from residential_api.utils.auth_dependencies import get_current_admin, get_current_user

router = APIRouter(prefix="/api/announcements", tags=["Announcements"])


@router.get("")
async def list_announcements(current_user: dict = Depends(get_current_user)):
    """The 20 newest announcements."""
    return {"announcements": announcement_service.latest()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_announcement(
    body: AnnouncementCreateRequest,
    current_admin: dict = Depends(get_current_admin),
):
    announcement = announcement_service.create(
        body.model_dump(),
        created_by=current_admin.get("name") or current_admin.get("username") or current_admin["id"],
    )
    return {"message": "Announcement created successfully", "announcement": announcement}


@router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(announcement_id: str, current_admin: dict = Depends(get_current_admin)):
    announcement_service.delete(announcement_id)
    return MessageResponse(message="Announcement deleted successfully")
