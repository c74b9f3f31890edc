"""
Employee Service

Staff registry (guards, maintenance, housekeeping, ...) with generated
EMPxxx identifiers.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple
from datetime import timedelta

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.auth_service import hash_password
from residential_api.utils.datetime_utils import date_to_datetime, get_now_utc, LOCAL_TZ
from residential_api.utils.exceptions import ConflictError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import paginate, search_filter

logger = get_logger(__name__)

SEARCH_FIELDS = ("name", "email", "employee_id", "designation", "department")
EMPLOYEE_ID_PREFIX = "EMP"
_EMPLOYEE_ID_RE = re.compile(r"^EMP(\d+)$")


def next_employee_id(existing_ids) -> str:
    """EMP + zero-padded number one above the highest existing one (EMP001 first)."""
    highest = 0
    for eid in existing_ids:
        m = _EMPLOYEE_ID_RE.match(eid or "")
        if m:
            highest = max(highest, int(m.group(1)))
    return f"{EMPLOYEE_ID_PREFIX}{highest + 1:03d}"


class EmployeeService:
    """Service for managing employees using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["employees"]

    def _check_email(self, email: Optional[str], exclude_id: Optional[str] = None) -> None:
        if not email:
            return
        query: Dict[str, Any] = {"email": email}
        if exclude_id:
            query["_id"] = {"$ne": id_query(exclude_id)["_id"]}
        if self.col.find_one(query, {"_id": 1}):
            raise ConflictError("Employee with this email already exists", "EmployeeService")

    @staticmethod
    def _prepare(data: Dict[str, Any], bcrypt_rounds: int) -> Dict[str, Any]:
        doc = dict(data)
        if doc.get("joining_date") is not None:
            doc["joining_date"] = date_to_datetime(doc["joining_date"])
        password = doc.pop("password", None)
        if password:
            doc["password_hash"] = hash_password(password, bcrypt_rounds)
        return doc

    def get(self, employee_id: str) -> Dict[str, Any]:
        employee = self.col.find_one(id_query(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", "EmployeeService")
        return doc_with_id(employee)

    def list_employees(self, params) -> Tuple[List[Dict[str, Any]], int]:
        query = search_filter(params.search, SEARCH_FIELDS)
        if params.status:
            query["status"] = params.status
        return paginate(self.col, query, params)

    def departments(self) -> List[str]:
        return sorted(d for d in self.col.distinct("department") if d)

    def designations(self) -> List[str]:
        return sorted(d for d in self.col.distinct("designation") if d)

    def stats_overview(self) -> Dict[str, Any]:
        total = self.col.count_documents({})
        active = self.col.count_documents({"status": "ACTIVE"})
        by_department = self.col.aggregate([
            {"$match": {"status": "ACTIVE"}},
            {"$group": {"_id": "$department", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ])
        month_ago = get_now_utc() - timedelta(days=30)
        recent = self.col.find(
            {"created_at": {"$gte": month_ago}},
            {"employee_id": 1, "name": 1, "designation": 1, "department": 1, "created_at": 1},
        ).sort([("created_at", DESCENDING), ("_id", DESCENDING)]).limit(5)
        return {
            "total_employees": total,
            "active_employees": active,
            "inactive_employees": total - active,
            "department_stats": [{"department": d["_id"], "count": d["count"]} for d in by_department],
            "recent_hires": docs_with_id(recent),
        }

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._check_email(data.get("email"))
        doc = self._prepare(data, self.config.auth.bcrypt_rounds)
        now = get_now_utc()
        doc.update(
            employee_id=next_employee_id(self.col.distinct("employee_id")),
            status="ACTIVE",
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        logger.info(f"[EmployeeService] Employee created: {doc['employee_id']} ({doc['email']})")
        return self.get(str(result.inserted_id))

    def update(self, employee_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.get(employee_id)
        self._check_email(data.get("email"), exclude_id=employee_id)
        updates = self._prepare(data, self.config.auth.bcrypt_rounds)
        updates["updated_at"] = get_now_utc()
        self.col.update_one(id_query(employee_id), {"$set": updates})
        logger.info(f"[EmployeeService] Employee updated: {employee_id} fields={sorted(data)}")
        return self.get(employee_id)

    def set_status(self, employee_id: str, status: str) -> Dict[str, Any]:
        self.get(employee_id)
        self.col.update_one(id_query(employee_id), {"$set": {"status": status, "updated_at": get_now_utc()}})
        logger.info(f"[EmployeeService] Employee {employee_id} status -> {status}")
        return self.get(employee_id)

    def qr_code(self, employee_id: str) -> Dict[str, Any]:
        employee = self.get(employee_id)
        payload = {
            "type": "employee_entry",
            "employeeId": employee["employee_id"],
            "employeeName": employee["name"],
            "designation": employee.get("designation"),
            "department": employee.get("department"),
            "status": employee.get("status"),
            "registrationDate": employee["created_at"].astimezone(LOCAL_TZ).date().isoformat(),
        }
        return {
            "qr_code": json.dumps(payload),
            "employee": {
                "id": employee["id"],
                "employee_id": employee["employee_id"],
                "name": employee["name"],
                "designation": employee.get("designation"),
                "department": employee.get("department"),
            },
        }

    def delete(self, employee_id: str) -> None:
        employee = self.get(employee_id)
        self.col.delete_one(id_query(employee_id))
        logger.info(f"[EmployeeService] Employee deleted: {employee['employee_id']}")
