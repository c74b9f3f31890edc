"""
Guest Service

Pre-registered guest visits. Each guest carries a ``guest_entry`` QR payload
valid between time_from and time_to (community local time) on the visit date.
"""

import json
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents, resident_ids_matching
from residential_api.utils.datetime_utils import (
    date_to_datetime,
    get_now_local,
    get_now_utc,
    parse_local_datetime,
    to_utc,
)
from residential_api.utils.exceptions import BadRequestError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import contains, paginate

logger = get_logger(__name__)

SEARCH_FIELDS = ("guest_name", "purpose", "phone")
NEWEST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def visit_window(visit_date: date, time_from: str, time_to: str) -> Tuple[str, str]:
    """validFrom / validUntil strings as written into the QR payload (local time, no offset)."""
    day = visit_date.isoformat()
    return f"{day}T{time_from}:00", f"{day}T{time_to}:00"


def window_ended(guest: Dict[str, Any], now=None) -> bool:
    now = now or get_now_utc()
    visit_day = to_utc(guest["visit_date"]).date()
    _, valid_until = visit_window(visit_day, guest["time_from"], guest["time_to"])
    return parse_local_datetime(valid_until) < now


class GuestService:
    """Service for guest registrations using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["guests"]

    def get(self, guest_id: str) -> Dict[str, Any]:
        guest = self.col.find_one(id_query(guest_id))
        if not guest:
            raise NotFoundError("Guest not found", "GuestService")
        return attach_residents(self.db, [doc_with_id(guest)])[0]

    def list_guests(self, params, resident_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], int]:
        query: Dict[str, Any] = {}
        if resident_id:
            query["resident_id"] = resident_id
        if params.status:
            query["status"] = params.status
        if params.search:
            clauses: List[Dict[str, Any]] = [{f: contains(params.search)} for f in SEARCH_FIELDS]
            if not resident_id:
                matching = resident_ids_matching(self.db, {"$or": [
                    {"name": contains(params.search)},
                    {"apartment": contains(params.search)},
                ]})
                if matching:
                    clauses.append({"resident_id": {"$in": matching}})
            query["$or"] = clauses
        guests, total = paginate(self.col, query, params)
        return attach_residents(self.db, guests), total

    def stats_overview(self) -> Dict[str, Any]:
        today = date_to_datetime(get_now_local().date())
        recent = attach_residents(self.db, docs_with_id(self.col.find({}).sort(NEWEST).limit(5)))
        return {
            "statistics": {
                "total_guests": self.col.count_documents({}),
                "active_guests": self.col.count_documents({"status": "ACTIVE"}),
                "expired_guests": self.col.count_documents({"status": "EXPIRED"}),
                "cancelled_guests": self.col.count_documents({"status": "CANCELLED"}),
                "today_guests": self.col.count_documents({"visit_date": today}),
            },
            "recent_guests": recent,
        }

    def resident_guests(self, resident_id: str) -> Dict[str, Any]:
        """All of a resident's guests; ACTIVE ones whose window has ended are marked EXPIRED first."""
        now = get_now_utc()
        guests = docs_with_id(self.col.find({"resident_id": resident_id}).sort(NEWEST))
        expired_ids = [g["id"] for g in guests if g.get("status") == "ACTIVE" and window_ended(g, now)]
        if expired_ids:
            self.col.update_many(
                {"_id": {"$in": [id_query(i)["_id"] for i in expired_ids]}},
                {"$set": {"status": "EXPIRED", "updated_at": now}},
            )
            for g in guests:
                if g["id"] in expired_ids:
                    g["status"] = "EXPIRED"
            logger.info(f"[GuestService] Expired {len(expired_ids)} guests of resident {resident_id}")

        def count(status: str) -> int:
            return sum(1 for g in guests if g.get("status") == status)

        return {
            "guests": guests,
            "statistics": {
                "total": len(guests),
                "active": count("ACTIVE"),
                "expired": count("EXPIRED"),
                "cancelled": count("CANCELLED"),
            },
        }

    def create(self, resident: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Register a guest for the host resident.

        Raises:
            BadRequestError: visit date before today, or time_to not after time_from
        """
        visit_date: date = data["visit_date"]
        if visit_date < get_now_local().date():
            raise BadRequestError("Visit date cannot be in the past", "GuestService")
        if data["time_to"] <= data["time_from"]:
            raise BadRequestError("End time must be after start time", "GuestService")

        valid_from, valid_until = visit_window(visit_date, data["time_from"], data["time_to"])
        qr_payload = {
            "type": "guest_entry",
            "guestName": data["guest_name"],
            "hostApartment": resident["apartment"],
            "hostName": resident["name"],
            "purpose": data["purpose"],
            "vehicleType": data.get("vehicle_type") or "None",
            "licensePlate": data.get("license_plate") or "",
            "validFrom": valid_from,
            "validUntil": valid_until,
            "idNumber": data["id_number"],
            "idType": data["id_type"],
            "phone": data["phone"],
        }
        now = get_now_utc()
        doc = {k: v for k, v in data.items() if k != "resident_id"}
        doc.update(
            resident_id=resident["id"],
            visit_date=date_to_datetime(visit_date),
            qr_code=json.dumps(qr_payload),
            status="ACTIVE",
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        logger.info(f"[GuestService] Guest registered: {doc['guest_name']} -> {resident['apartment']} on {visit_date}")
        return self.get(str(result.inserted_id))

    def set_status(self, guest_id: str, status: str) -> Dict[str, Any]:
        self.get(guest_id)
        self.col.update_one(id_query(guest_id), {"$set": {"status": status, "updated_at": get_now_utc()}})
        logger.info(f"[GuestService] Guest {guest_id} status -> {status}")
        return self.get(guest_id)

    def delete(self, guest_id: str) -> None:
        self.get(guest_id)
        self.col.delete_one(id_query(guest_id))
        logger.info(f"[GuestService] Guest deleted: {guest_id}")
