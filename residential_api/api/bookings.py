from fastapi import APIRouter, Depends, HTTPException, status

from residential_api.schemas.bookings import (
    ServiceBookingCreateRequest,
    ServiceBookingUpdateRequest,
    ServiceReviewRequest,
)
from residential_api.schemas.common import UserRole
from residential_api.services.container import booking_service
from residential_api.utils.auth_dependencies import get_current_resident, require_roles
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/service-bookings", tags=["Service Bookings"])

get_booking_user = require_roles(UserRole.ADMIN, UserRole.RESIDENT, UserRole.SERVICE_PROVIDER)


@router.get("")
async def list_bookings(current_user: dict = Depends(get_booking_user)):
    role = current_user["role"]
    bookings = booking_service.list_bookings(
        resident_id=current_user["id"] if role == UserRole.RESIDENT.value else None,
        service_provider_id=current_user["id"] if role == UserRole.SERVICE_PROVIDER.value else None,
    )
    return {"bookings": bookings}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(body: ServiceBookingCreateRequest, current_resident: dict = Depends(get_current_resident)):
    booking = booking_service.create(current_resident, body.model_dump(exclude_none=True))
    return {"message": "Service booked successfully", "booking": booking}


@router.patch("/{booking_id}")
async def update_booking(
    booking_id: str,
    body: ServiceBookingUpdateRequest,
    current_user: dict = Depends(get_booking_user),
):
    """
    Admins and the booked provider may change any field; the booking's
    resident may only cancel it.
    """
    booking = booking_service.get(booking_id)
    data = body.model_dump(exclude_unset=True, exclude_none=True)
    role = current_user["role"]
    if role == UserRole.SERVICE_PROVIDER.value and booking["service_provider_id"] != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only update your own bookings")
    if role == UserRole.RESIDENT.value:
        if booking["resident_id"] != current_user["id"]:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only update your own bookings")
        if data != {"status": "CANCELLED"}:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Residents can only cancel bookings")
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")
    updated = booking_service.update(booking_id, data)
    logger.info(f"[API] Booking {booking_id} updated by {role} {current_user['id']}")
    return {"message": "Booking updated successfully", "booking": updated}


@router.post("/{booking_id}/review", status_code=status.HTTP_201_CREATED)
async def review_booking(
    booking_id: str,
    body: ServiceReviewRequest,
    current_resident: dict = Depends(get_current_resident),
):
    review = booking_service.add_review(booking_id, current_resident["id"], body.rating, body.review)
    return {"message": "Review submitted successfully", "review": review}
