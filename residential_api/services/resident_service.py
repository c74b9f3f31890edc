"""
Resident Service

Registration, approval, profile updates and the admin registry of residents.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from datetime import timedelta

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.auth_service import hash_password
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import ConflictError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import paginate, search_filter

logger = get_logger(__name__)

SEARCH_FIELDS = ("name", "email", "apartment", "phone")

# Collections whose documents belong to a resident and go with it on delete
OWNED_COLLECTIONS = (
    "vehicles",
    "complaints",
    "service_bookings",
    "maintenance_bills",
    "guests",
    "deliveries",
)


def public_summary(resident: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(resident.get("_id", resident.get("id"))),
        "name": resident.get("name"),
        "email": resident.get("email"),
        "apartment": resident.get("apartment"),
        "status": resident.get("status"),
        "approval_status": resident.get("approval_status"),
    }


class ResidentService:
    """Service for managing residents using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["residents"]

    def _check_unique(self, email: Optional[str], apartment: Optional[str], exclude_id: Optional[str] = None) -> None:
        not_self = {"_id": {"$ne": id_query(exclude_id)["_id"]}} if exclude_id else {}
        if email and self.col.find_one({"email": email, **not_self}, {"_id": 1}):
            raise ConflictError("Email already registered", "ResidentService")
        if apartment and self.col.find_one({"apartment": apartment, **not_self}, {"_id": 1}):
            raise ConflictError("Apartment already registered", "ResidentService")

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new resident as PENDING/PENDING. Raises ConflictError on email or apartment clash."""
        self._check_unique(data.get("email"), data.get("apartment"))
        doc = dict(data)
        password = doc.pop("password", None)
        if password:
            doc["password_hash"] = hash_password(password, self.config.auth.bcrypt_rounds)
        now = get_now_utc()
        doc.update(
            status="PENDING",
            approval_status="PENDING",
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"[ResidentService] Resident registered: {doc['email']} ({doc['apartment']})")
        return public_summary(doc)

    def get(self, resident_id: str) -> Dict[str, Any]:
        resident = self.col.find_one(id_query(resident_id))
        if not resident:
            raise NotFoundError("Resident not found", "ResidentService")
        return doc_with_id(resident)

    def find_by_apartment(self, apartment: str) -> Optional[Dict[str, Any]]:
        return doc_with_id(self.col.find_one({"apartment": apartment}))

    def _counts(self, resident_id: str) -> Dict[str, int]:
        return {
            "vehicles": self.db["vehicles"].count_documents({"resident_id": resident_id}),
            "complaints": self.db["complaints"].count_documents({"resident_id": resident_id}),
            "service_bookings": self.db["service_bookings"].count_documents({"resident_id": resident_id}),
        }

    def list_residents(self, params) -> Tuple[List[Dict[str, Any]], int]:
        query = search_filter(params.search, SEARCH_FIELDS)
        if params.status:
            query["status"] = params.status
        residents, total = paginate(self.col, query, params)
        for r in residents:
            r["counts"] = self._counts(r["id"])
        return residents, total

    def stats_overview(self) -> Dict[str, Any]:
        week_ago = get_now_utc() - timedelta(days=7)
        recent = self.col.find(
            {"created_at": {"$gte": week_ago}},
            {"name": 1, "apartment": 1, "status": 1, "approval_status": 1, "created_at": 1},
        ).sort([("created_at", DESCENDING), ("_id", DESCENDING)]).limit(5)
        return {
            "total_residents": self.col.count_documents({}),
            "active_residents": self.col.count_documents({"status": "ACTIVE", "approval_status": "APPROVED"}),
            "pending_approvals": self.col.count_documents({"approval_status": "PENDING"}),
            "total_vehicles": self.db["vehicles"].count_documents({"resident_id": {"$ne": None}}),
            "total_complaints": self.db["complaints"].count_documents({}),
            "open_complaints": self.db["complaints"].count_documents({"status": "OPEN"}),
            "recent_registrations": docs_with_id(recent),
        }

    def get_detail(self, resident_id: str) -> Dict[str, Any]:
        """Resident with vehicles and the five latest complaints, bookings and bills."""
        resident = self.get(resident_id)
        newest = [("created_at", DESCENDING), ("_id", DESCENDING)]
        by_resident = {"resident_id": resident["id"]}
        resident["vehicles"] = docs_with_id(self.db["vehicles"].find(by_resident).sort(newest))
        resident["complaints"] = docs_with_id(self.db["complaints"].find(by_resident).sort(newest).limit(5))
        resident["service_bookings"] = docs_with_id(
            self.db["service_bookings"].find(by_resident).sort(newest).limit(5)
        )
        resident["maintenance_bills"] = docs_with_id(
            self.db["maintenance_bills"].find(by_resident).sort(newest).limit(5)
        )
        return resident

    def update(self, resident_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.get(resident_id)
        self._check_unique(data.get("email"), data.get("apartment"), exclude_id=resident_id)
        updates = dict(data)
        password = updates.pop("password", None)
        if password:
            updates["password_hash"] = hash_password(password, self.config.auth.bcrypt_rounds)
        updates["updated_at"] = get_now_utc()
        self.col.update_one(id_query(resident_id), {"$set": updates})
        logger.info(f"[ResidentService] Resident updated: {resident_id} fields={sorted(data)}")
        return self.get(resident_id)

    def set_approval(self, resident_id: str, approval_status: str) -> Dict[str, Any]:
        """APPROVED activates the resident, REJECTED rejects it."""
        self.get(resident_id)
        status = "ACTIVE" if approval_status == "APPROVED" else "REJECTED"
        self.col.update_one(
            id_query(resident_id),
            {"$set": {"approval_status": approval_status, "status": status, "updated_at": get_now_utc()}},
        )
        logger.info(f"[ResidentService] Resident {resident_id} approval -> {approval_status}")
        return self.get(resident_id)

    def qr_code(self, resident_id: str) -> Dict[str, Any]:
        resident = self.get(resident_id)
        payload = {
            "type": "resident_entry",
            "residentId": resident["id"],
            "residentName": resident["name"],
            "apartment": resident["apartment"],
            "phone": resident.get("phone"),
        }
        return {"qr_code": json.dumps(payload), "resident": public_summary(resident)}

    def delete(self, resident_id: str) -> None:
        resident = self.get(resident_id)
        for name in OWNED_COLLECTIONS:
            self.db[name].delete_many({"resident_id": resident["id"]})
        self.db["service_reviews"].delete_many({"resident_id": resident["id"]})
        self.col.delete_one(id_query(resident_id))
        logger.info(f"[ResidentService] Resident deleted: {resident_id} ({resident.get('apartment')})")
