"""
Service Provider Service

Registration, approval and directory of service providers (plumbers,
electricians, cleaners, ...).
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.auth_service import hash_password
from residential_api.services.lookups import attach_residents
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import ConflictError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import contains, paginate, search_filter

logger = get_logger(__name__)

SEARCH_FIELDS = ("name", "email", "service_category", "service_area")
NEWEST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def public_summary(provider: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(provider.get("_id", provider.get("id"))),
        "name": provider.get("name"),
        "username": provider.get("username"),
        "email": provider.get("email"),
        "service_category": provider.get("service_category"),
        "status": provider.get("status"),
    }


class ServiceProviderService:
    """Service for managing service providers using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["service_providers"]

    def _check_unique(self, email: Optional[str], username: Optional[str], exclude_id: Optional[str] = None) -> None:
        not_self = {"_id": {"$ne": id_query(exclude_id)["_id"]}} if exclude_id else {}
        if email and self.col.find_one({"email": email, **not_self}, {"_id": 1}):
            raise ConflictError("Email already registered", "ServiceProviderService")
        if username and self.col.find_one({"username": username, **not_self}, {"_id": 1}):
            raise ConflictError("Username already taken", "ServiceProviderService")

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._check_unique(data.get("email"), data.get("username"))
        doc = dict(data)
        doc["password_hash"] = hash_password(doc.pop("password"), self.config.auth.bcrypt_rounds)
        now = get_now_utc()
        doc.update(
            status="PENDING",
            rating=0.0,
            total_reviews=0,
            completed_jobs=0,
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"[ServiceProviderService] Provider registered: {doc['username']} ({doc['service_category']})")
        return public_summary(doc)

    def get(self, provider_id: str) -> Dict[str, Any]:
        provider = self.col.find_one(id_query(provider_id))
        if not provider:
            raise NotFoundError("Service provider not found", "ServiceProviderService")
        return doc_with_id(provider)

    def list_providers(self, params) -> Tuple[List[Dict[str, Any]], int]:
        query = search_filter(params.search, SEARCH_FIELDS)
        if params.status:
            query["status"] = params.status
        if params.category:
            query["service_category"] = contains(params.category)
        providers, total = paginate(self.col, query, params)
        for p in providers:
            by_provider = {"service_provider_id": p["id"]}
            p["counts"] = {
                "vehicles": self.db["vehicles"].count_documents(by_provider),
                "service_bookings": self.db["service_bookings"].count_documents(by_provider),
                "service_reviews": self.db["service_reviews"].count_documents(by_provider),
            }
        return providers, total

    def categories(self) -> List[str]:
        return sorted(c for c in self.col.distinct("service_category", {"status": "ACTIVE"}) if c)

    def get_detail(self, provider_id: str) -> Dict[str, Any]:
        """Provider with vehicles, ten latest bookings and five latest reviews."""
        provider = self.get(provider_id)
        by_provider = {"service_provider_id": provider["id"]}
        provider["vehicles"] = docs_with_id(self.db["vehicles"].find(by_provider).sort(NEWEST))
        provider["service_bookings"] = docs_with_id(
            self.db["service_bookings"].find(by_provider).sort(NEWEST).limit(10)
        )
        reviews = docs_with_id(self.db["service_reviews"].find(by_provider).sort(NEWEST).limit(5))
        provider["service_reviews"] = attach_residents(self.db, reviews, fields=("name",))
        return provider

    def update(self, provider_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.get(provider_id)
        self._check_unique(data.get("email"), data.get("username"), exclude_id=provider_id)
        updates = dict(data)
        password = updates.pop("password", None)
        if password:
            updates["password_hash"] = hash_password(password, self.config.auth.bcrypt_rounds)
        updates["updated_at"] = get_now_utc()
        self.col.update_one(id_query(provider_id), {"$set": updates})
        logger.info(f"[ServiceProviderService] Provider updated: {provider_id} fields={sorted(data)}")
        return self.get(provider_id)

    def set_status(self, provider_id: str, status: str) -> Dict[str, Any]:
        self.get(provider_id)
        self.col.update_one(id_query(provider_id), {"$set": {"status": status, "updated_at": get_now_utc()}})
        logger.info(f"[ServiceProviderService] Provider {provider_id} status -> {status}")
        return self.get(provider_id)

    def list_bookings(self, provider_id: str, params) -> Tuple[List[Dict[str, Any]], int]:
        self.get(provider_id)
        query: Dict[str, Any] = {"service_provider_id": provider_id}
        if params.status:
            query["status"] = params.status
        bookings, total = paginate(self.db["service_bookings"], query, params)
        attach_residents(self.db, bookings, fields=("name", "apartment", "phone"))
        return bookings, total

    def qr_code(self, provider_id: str) -> Dict[str, Any]:
        provider = self.get(provider_id)
        payload = {
            "type": "service_provider_entry",
            "providerId": provider["id"],
            "providerName": provider["name"],
            "serviceCategory": provider.get("service_category"),
            "phone": provider.get("phone"),
            "status": provider.get("status"),
        }
        return {"qr_code": json.dumps(payload), "service_provider": public_summary(provider)}

    def delete(self, provider_id: str) -> None:
        provider = self.get(provider_id)
        self.db["vehicles"].delete_many({"service_provider_id": provider["id"]})
        self.db["service_reviews"].delete_many({"service_provider_id": provider["id"]})
        self.col.delete_one(id_query(provider_id))
        logger.info(f"[ServiceProviderService] Provider deleted: {provider_id} ({provider.get('username')})")
