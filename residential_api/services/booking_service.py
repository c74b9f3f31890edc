"""
Service Booking Service

Residents book service providers; providers move bookings through
PENDING -> CONFIRMED -> IN_PROGRESS -> COMPLETED, and residents review
completed work.
"""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_providers, attach_residents
from residential_api.utils.datetime_utils import date_to_datetime, get_now_utc
from residential_api.utils.exceptions import BadRequestError, NotFoundError, PermissionDeniedError
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

NEWEST = [("created_at", DESCENDING), ("_id", DESCENDING)]


class BookingService:
    """Service for service bookings and reviews using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["service_bookings"]
        self.reviews = self.db["service_reviews"]
        self.providers = self.db["service_providers"]

    def _expand(self, bookings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        attach_residents(self.db, bookings)
        return attach_providers(self.db, bookings)

    def get(self, booking_id: str) -> Dict[str, Any]:
        booking = self.col.find_one(id_query(booking_id))
        if not booking:
            raise NotFoundError("Service booking not found", "BookingService")
        return doc_with_id(booking)

    def list_bookings(
        self,
        resident_id: Optional[str] = None,
        service_provider_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if resident_id:
            query["resident_id"] = resident_id
        if service_provider_id:
            query["service_provider_id"] = service_provider_id
        return self._expand(docs_with_id(self.col.find(query).sort(NEWEST)))

    def create(self, resident: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        """Book an ACTIVE provider. 404 for an unknown provider, 400 for an inactive one."""
        provider = self.providers.find_one(id_query(data["service_provider_id"]), {"status": 1})
        if not provider:
            raise NotFoundError("Service provider not found", "BookingService")
        if provider.get("status") != "ACTIVE":
            raise BadRequestError("Service provider is not available", "BookingService")
        now = get_now_utc()
        doc = dict(data)
        doc.update(
            service_provider_id=str(provider["_id"]),
            resident_id=resident["id"],
            resident_name=resident.get("name"),
            scheduled_date=date_to_datetime(doc["scheduled_date"]),
            priority=doc.get("priority") or "MEDIUM",
            status="PENDING",
            actual_cost=None,
            completion_date=None,
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        logger.info(f"[BookingService] Booking created: resident={resident['id']} provider={doc['service_provider_id']}")
        return self._expand([self.get(str(result.inserted_id))])[0]

    def update(self, booking_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a status / cost / notes / completion update.

        Moving to COMPLETED stamps completion_date (unless given) and counts
        the job on the provider once.
        """
        booking = self.get(booking_id)
        updates: Dict[str, Any] = {k: v for k, v in data.items() if v is not None}
        if updates.get("completion_date") is not None:
            updates["completion_date"] = date_to_datetime(updates["completion_date"])
        newly_completed = updates.get("status") == "COMPLETED" and booking.get("status") != "COMPLETED"
        if newly_completed and "completion_date" not in updates:
            updates["completion_date"] = get_now_utc()
        updates["updated_at"] = get_now_utc()
        self.col.update_one(id_query(booking_id), {"$set": updates})
        if newly_completed:
            self.providers.update_one(
                id_query(booking["service_provider_id"]),
                {"$inc": {"completed_jobs": 1}},
            )
        logger.info(f"[BookingService] Booking {booking_id} updated: {sorted(data)}")
        return self._expand([self.get(booking_id)])[0]

    def add_review(self, booking_id: str, resident_id: str, rating: int, review: str) -> Dict[str, Any]:
        """Review a COMPLETED booking once and refresh the provider's rating."""
        booking = self.get(booking_id)
        if booking.get("resident_id") != resident_id:
            raise PermissionDeniedError("You can only review your own bookings", "BookingService")
        if booking.get("status") != "COMPLETED":
            raise BadRequestError("Only completed bookings can be reviewed", "BookingService")
        if self.reviews.find_one({"booking_id": booking["id"]}, {"_id": 1}):
            raise BadRequestError("Booking already reviewed", "BookingService")
        now = get_now_utc()
        doc = {
            "booking_id": booking["id"],
            "resident_id": resident_id,
            "service_provider_id": booking["service_provider_id"],
            "rating": rating,
            "review": review,
            "service_category": booking.get("service_category"),
            "review_date": now,
            "created_at": now,
            "updated_at": now,
        }
        result = self.reviews.insert_one(doc)
        self._refresh_rating(booking["service_provider_id"])
        logger.info(f"[BookingService] Review {rating}/5 for provider {booking['service_provider_id']}")
        return doc_with_id(self.reviews.find_one({"_id": result.inserted_id}))

    def _refresh_rating(self, provider_id: str) -> None:
        ratings = [r["rating"] for r in self.reviews.find({"service_provider_id": provider_id}, {"rating": 1})]
        average = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        self.providers.update_one(
            id_query(provider_id),
            {"$set": {"rating": average, "total_reviews": len(ratings), "updated_at": get_now_utc()}},
        )
