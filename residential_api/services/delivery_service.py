"""
Delivery Service
"""

import json
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import NotFoundError
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)


class DeliveryService:
    """Service for expected deliveries using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["deliveries"]

    def get(self, delivery_id: str) -> Dict[str, Any]:
        delivery = self.col.find_one(id_query(delivery_id))
        if not delivery:
            raise NotFoundError("Delivery not found", "DeliveryService")
        return attach_residents(self.db, [doc_with_id(delivery)])[0]

    def list_deliveries(self, resident_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"resident_id": resident_id} if resident_id else {}
        deliveries = docs_with_id(self.col.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))
        return attach_residents(self.db, deliveries)

    def create(self, resident: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        qr_payload = {
            "type": "delivery_entry",
            "riderName": data["rider_name"],
            "companyName": data["company_name"],
            "apartment": resident["apartment"],
            "residentId": resident["id"],
            "residentName": resident["name"],
            "idNumber": data["id_number"],
            "idType": data["id_type"],
        }
        now = get_now_utc()
        doc = {k: v for k, v in data.items() if k != "resident_id"}
        doc.update(
            resident_id=resident["id"],
            qr_code=json.dumps(qr_payload),
            status="EXPECTED",
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        logger.info(f"[DeliveryService] Delivery expected: {doc['company_name']} -> {resident['apartment']}")
        return self.get(str(result.inserted_id))

    def set_status(self, delivery_id: str, status: str) -> Dict[str, Any]:
        self.get(delivery_id)
        self.col.update_one(id_query(delivery_id), {"$set": {"status": status, "updated_at": get_now_utc()}})
        logger.info(f"[DeliveryService] Delivery {delivery_id} status -> {status}")
        return self.get(delivery_id)
