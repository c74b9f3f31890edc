"""
Complaint Service
"""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import NotFoundError
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)


class ComplaintService:
    """Service for resident complaints using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["complaints"]

    def get(self, complaint_id: str) -> Dict[str, Any]:
        complaint = self.col.find_one(id_query(complaint_id))
        if not complaint:
            raise NotFoundError("Complaint not found", "ComplaintService")
        return doc_with_id(complaint)

    def list_complaints(self, resident_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"resident_id": resident_id} if resident_id else {}
        complaints = docs_with_id(self.col.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))
        return attach_residents(self.db, complaints)

    def create(self, resident_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        now = get_now_utc()
        doc = dict(data)
        doc.update(
            resident_id=resident_id,
            images=doc.get("images") or [],
            status="OPEN",
            admin_response=None,
            response_date=None,
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        logger.info(f"[ComplaintService] Complaint filed by {resident_id}: {doc['title']}")
        return attach_residents(self.db, [self.get(str(result.inserted_id))])[0]

    def update(self, complaint_id: str, status: Optional[str], admin_response: Optional[str]) -> Dict[str, Any]:
        """Set status and/or the admin response (response_date is stamped with a response)."""
        self.get(complaint_id)
        now = get_now_utc()
        updates: Dict[str, Any] = {"updated_at": now}
        if status:
            updates["status"] = status
        if admin_response:
            updates["admin_response"] = admin_response
            updates["response_date"] = now
        self.col.update_one(id_query(complaint_id), {"$set": updates})
        logger.info(f"[ComplaintService] Complaint {complaint_id} updated status={status}")
        return attach_residents(self.db, [self.get(complaint_id)])[0]
