"""
Announcement Service
"""

from typing import Any, Dict, List

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import NotFoundError
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

LATEST_COUNT = 20


class AnnouncementService:
    """Service for community announcements using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["announcements"]

    def latest(self, limit: int = LATEST_COUNT) -> List[Dict[str, Any]]:
        return docs_with_id(self.col.find({}).sort([("created_at", DESCENDING), ("_id", DESCENDING)]).limit(limit))

    def create(self, data: Dict[str, Any], created_by: str) -> Dict[str, Any]:
        now = get_now_utc()
        doc = {**data, "created_by": created_by, "created_at": now, "updated_at": now}
        result = self.col.insert_one(doc)
        logger.info(f"[AnnouncementService] Announcement posted by {created_by}: {doc['title']}")
        return doc_with_id(self.col.find_one({"_id": result.inserted_id}))

    def delete(self, announcement_id: str) -> None:
        if not self.col.find_one(id_query(announcement_id), {"_id": 1}):
            raise NotFoundError("Announcement not found", "AnnouncementService")
        self.col.delete_one(id_query(announcement_id))
        logger.info(f"[AnnouncementService] Announcement deleted: {announcement_id}")
