"""
Dashboard Service

Per-role summary statistics and recent activity.
"""

from typing import Any, Dict

from pymongo import ASCENDING, DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import docs_with_id, get_database
from residential_api.services.lookups import attach_providers, attach_residents, sum_field
from residential_api.utils.datetime_utils import get_now_utc, local_day_bounds

NEWEST = [("created_at", DESCENDING), ("_id", DESCENDING)]


class DashboardService:
    """Aggregates counts across collections for the admin, resident and provider dashboards"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)

    def _count(self, collection: str, query: Dict[str, Any] = None) -> int:
        return self.db[collection].count_documents(query or {})

    def _recent(self, collection: str, query: Dict[str, Any], limit: int, sort=None):
        return docs_with_id(self.db[collection].find(query).sort(sort or NEWEST).limit(limit))

    def admin_stats(self) -> Dict[str, Any]:
        start, end = local_day_bounds()
        today = {"created_at": {"$gte": start, "$lt": end}}
        now = get_now_utc()

        statistics = {
            "residents": {
                "total": self._count("residents"),
                "active": self._count("residents", {"status": "ACTIVE", "approval_status": "APPROVED"}),
                "pending_approvals": self._count("residents", {"approval_status": "PENDING"}),
            },
            "service_providers": {
                "total": self._count("service_providers"),
                "active": self._count("service_providers", {"status": "ACTIVE"}),
                "pending": self._count("service_providers", {"status": "PENDING"}),
            },
            "employees": {
                "total": self._count("employees"),
                "active": self._count("employees", {"status": "ACTIVE"}),
            },
            "complaints": {
                "total": self._count("complaints"),
                "open": self._count("complaints", {"status": "OPEN"}),
                "in_progress": self._count("complaints", {"status": "IN_PROGRESS"}),
                "resolved": self._count("complaints", {"status": "RESOLVED"}),
            },
            "gate_entries": {"today": self._count("gate_entries", today)},
            "vehicles": {"total": self._count("vehicles")},
            "maintenance_bills": {
                "total": self._count("maintenance_bills"),
                "pending": self._count("maintenance_bills", {"status": "PENDING"}),
                "paid": self._count("maintenance_bills", {"status": "PAID"}),
                "overdue": self._count("maintenance_bills", {"status": "PENDING", "due_date": {"$lt": now}}),
            },
            "service_bookings": {
                "today": self._count("service_bookings", today),
                "pending": self._count("service_bookings", {"status": "PENDING"}),
                "completed": self._count("service_bookings", {"status": "COMPLETED"}),
            },
        }
        bookings = attach_residents(self.db, self._recent("service_bookings", {}, 5))
        recent = {
            "complaints": attach_residents(self.db, self._recent("complaints", {}, 5)),
            "gate_entries": attach_residents(self.db, self._recent("gate_entries", {}, 10)),
            "bookings": attach_providers(self.db, bookings),
        }
        return {"statistics": statistics, "recent_activities": recent}

    def resident_stats(self, resident_id: str) -> Dict[str, Any]:
        mine = {"resident_id": resident_id}
        now = get_now_utc()
        overdue = self.db["maintenance_bills"].find(
            {**mine, "status": "PENDING", "due_date": {"$lt": now}}, {"amount": 1}
        )
        statistics = {
            "complaints": {
                "total": self._count("complaints", mine),
                "open": self._count("complaints", {**mine, "status": "OPEN"}),
            },
            "service_bookings": {
                "total": self._count("service_bookings", mine),
                "pending": self._count("service_bookings", {**mine, "status": "PENDING"}),
            },
            "vehicles": {"total": self._count("vehicles", mine)},
            "bills": {
                "total": self._count("maintenance_bills", mine),
                "unpaid": self._count("maintenance_bills", {**mine, "status": "PENDING"}),
                "overdue_amount": sum_field(overdue, "amount"),
            },
        }
        recent = {
            "complaints": self._recent("complaints", mine, 3),
            "bookings": attach_providers(self.db, self._recent("service_bookings", mine, 3)),
            "upcoming_bills": self._recent(
                "maintenance_bills",
                {**mine, "status": "PENDING", "due_date": {"$gte": now}},
                3,
                sort=[("due_date", ASCENDING), ("_id", ASCENDING)],
            ),
        }
        return {"statistics": statistics, "recent_activities": recent}

    def service_provider_stats(self, provider_id: str) -> Dict[str, Any]:
        mine = {"service_provider_id": provider_id}
        completed = list(self.db["service_bookings"].find({**mine, "status": "COMPLETED"}, {"actual_cost": 1}))
        ratings = [r.get("rating") or 0 for r in self.db["service_reviews"].find(mine, {"rating": 1})]
        statistics = {
            "bookings": {
                "total": self._count("service_bookings", mine),
                "pending": self._count("service_bookings", {**mine, "status": "PENDING"}),
                "completed": len(completed),
            },
            "earnings": {"total": sum_field(completed, "actual_cost")},
            "reviews": {
                "total": len(ratings),
                "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
            },
            "vehicles": {"total": self._count("vehicles", mine)},
        }
        recent = {
            "bookings": attach_residents(self.db, self._recent("service_bookings", mine, 5)),
            "reviews": attach_residents(
                self.db,
                self._recent("service_reviews", mine, 3, sort=[("review_date", DESCENDING), ("_id", DESCENDING)]),
            ),
        }
        return {"statistics": statistics, "recent_activities": recent}
