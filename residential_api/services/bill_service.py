"""
Maintenance Bill Service

Monthly maintenance billing: bulk generation for approved residents,
payment tracking and collection statistics.
"""

from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents, resident_ids_matching, sum_field
from residential_api.utils.datetime_utils import date_to_datetime, get_now_local, get_now_utc, to_utc, LOCAL_TZ
from residential_api.utils.exceptions import BadRequestError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import contains, paginate

logger = get_logger(__name__)

NEWEST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def is_overdue(bill: Dict[str, Any], now=None) -> bool:
    """A PENDING bill whose due date has passed."""
    now = now or get_now_utc()
    return bill.get("status") == "PENDING" and bill.get("due_date") is not None and to_utc(bill["due_date"]) < now


class BillService:
    """Service for maintenance bills using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["maintenance_bills"]

    def get(self, bill_id: str) -> Dict[str, Any]:
        bill = self.col.find_one(id_query(bill_id))
        if not bill:
            raise NotFoundError("Maintenance bill not found", "BillService")
        return attach_residents(self.db, [doc_with_id(bill)])[0]

    def list_bills(self, params, resident_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], int]:
        """
        Paginated bills. Search matches month, an exact numeric year and, when
        not scoped to one resident, the resident's name or apartment.
        """
        query: Dict[str, Any] = {}
        if resident_id:
            query["resident_id"] = resident_id
        if params.status:
            query["status"] = params.status
        if params.search:
            clauses: List[Dict[str, Any]] = [{"month": contains(params.search)}]
            if params.search.strip().isdigit():
                clauses.append({"year": int(params.search)})
            if not resident_id:
                matching = resident_ids_matching(self.db, {"$or": [
                    {"name": contains(params.search)},
                    {"apartment": contains(params.search)},
                ]})
                if matching:
                    clauses.append({"resident_id": {"$in": matching}})
            query["$or"] = clauses
        bills, total = paginate(self.col, query, params)
        return attach_residents(self.db, bills), total

    def stats_overview(self) -> Dict[str, Any]:
        now = get_now_utc()
        bills = list(self.col.find({}, {"status": 1, "amount": 1, "due_date": 1, "month": 1, "year": 1}))
        total = len(bills)
        paid = [b for b in bills if b.get("status") == "PAID"]

        groups: Dict[Tuple[str, int], Dict[str, Any]] = {}
        for b in bills:
            key = (b.get("month"), b.get("year"))
            group = groups.setdefault(key, {"month": key[0], "year": key[1], "count": 0, "amount": 0})
            group["count"] += 1
            group["amount"] += b.get("amount") or 0
        monthly = sorted(groups.values(), key=lambda g: (g["year"] or 0, g["month"] or ""), reverse=True)[:12]

        return {
            "statistics": {
                "total_bills": total,
                "pending_bills": sum(1 for b in bills if b.get("status") == "PENDING"),
                "paid_bills": len(paid),
                "overdue_bills": sum(1 for b in bills if is_overdue(b, now)),
                "total_amount": sum_field(bills, "amount"),
                "collected_amount": sum_field(paid, "amount"),
                "collection_rate": round(len(paid) / total * 100) if total else 0,
            },
            "monthly_stats": monthly,
        }

    def resident_bills(self, resident_id: str) -> Dict[str, Any]:
        """All of a resident's bills plus outstanding / overdue / paid-this-month figures."""
        bills = attach_residents(self.db, docs_with_id(self.col.find({"resident_id": resident_id}).sort(NEWEST)))
        now = get_now_utc()
        local_now = get_now_local()

        def paid_this_month(b: Dict[str, Any]) -> bool:
            if b.get("status") != "PAID" or not b.get("paid_date"):
                return False
            paid_at = to_utc(b["paid_date"]).astimezone(LOCAL_TZ)
            return (paid_at.year, paid_at.month) == (local_now.year, local_now.month)

        return {
            "bills": bills,
            "statistics": {
                "total_outstanding": sum_field((b for b in bills if b.get("status") == "PENDING"), "amount"),
                "overdue_bills": sum(1 for b in bills if is_overdue(b, now)),
                "paid_this_month": sum(1 for b in bills if paid_this_month(b)),
                "total_bills": len(bills),
            },
        }

    def generate(self, bill_data: Dict[str, Any], resident_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Create one bill per ACTIVE+APPROVED target resident for month/year,
        skipping residents already billed for that period.

        Raises:
            BadRequestError: no eligible residents, or all of them already billed
        """
        query: Dict[str, Any] = {"status": "ACTIVE", "approval_status": "APPROVED"}
        if resident_ids:
            query["_id"] = {"$in": [id_query(r)["_id"] for r in resident_ids]}
        targets = [str(r["_id"]) for r in self.db["residents"].find(query, {"_id": 1})]
        if not targets:
            raise BadRequestError("No active residents found to generate bills for", "BillService")

        month, year = bill_data["month"], bill_data["year"]
        already = {
            b["resident_id"]
            for b in self.col.find(
                {"resident_id": {"$in": targets}, "month": month, "year": year},
                {"resident_id": 1},
            )
        }
        to_bill = [r for r in targets if r not in already]
        if not to_bill:
            raise BadRequestError(
                f"Bills for {month} {year} already exist for all selected residents", "BillService"
            )

        now = get_now_utc()
        due_date = date_to_datetime(bill_data["due_date"])
        docs = [
            {
                "resident_id": rid,
                "month": month,
                "year": year,
                "amount": bill_data["amount"],
                "due_date": due_date,
                "paid_date": None,
                "status": "PENDING",
                "items": [dict(i) for i in bill_data.get("items") or []],
                "created_at": now,
                "updated_at": now,
            }
            for rid in to_bill
        ]
        result = self.col.insert_many(docs)
        bills = attach_residents(
            self.db, docs_with_id(self.col.find({"_id": {"$in": result.inserted_ids}}).sort("_id", 1))
        )
        logger.info(f"[BillService] Generated {len(bills)} bills for {month} {year} (skipped {len(already)})")
        return {"bills": bills, "skipped": len(already)}

    def update_status(self, bill_id: str, status: Optional[str], paid_date=None) -> Dict[str, Any]:
        """Set status and/or paid date. PAID without a date is stamped now."""
        self.get(bill_id)
        updates: Dict[str, Any] = {"updated_at": get_now_utc()}
        if status:
            updates["status"] = status
        if paid_date is not None:
            updates["paid_date"] = to_utc(paid_date)
        elif status == "PAID":
            updates["paid_date"] = get_now_utc()
        self.col.update_one(id_query(bill_id), {"$set": updates})
        logger.info(f"[BillService] Bill {bill_id} status -> {status}")
        return self.get(bill_id)

    def mark_paid(self, bill_id: str, by_admin: bool) -> Dict[str, Any]:
        """
        Admins mark the bill PAID; a resident's call is only a payment
        notification and leaves the bill unchanged.

        Raises:
            BadRequestError: the bill is already PAID
        """
        bill = self.get(bill_id)
        if bill.get("status") == "PAID":
            raise BadRequestError("This bill has already been marked as paid", "BillService")
        if by_admin:
            bill = self.update_status(bill_id, "PAID")
            message = "Bill marked as paid successfully"
        else:
            logger.info(f"[BillService] Payment notification for bill {bill_id} from resident {bill['resident_id']}")
            message = "Payment notification sent to admin. Bill will be marked as paid once verified."
        return {"message": message, "bill": bill}

    def delete(self, bill_id: str) -> None:
        self.get(bill_id)
        self.col.delete_one(id_query(bill_id))
        logger.info(f"[BillService] Bill deleted: {bill_id}")
