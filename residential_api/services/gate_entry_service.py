"""
Gate Entry Service

Logs people and vehicles passing the gate. A QR scan is turned into an
ENTRY or EXIT row: ENTRY when the person has no previous row for the same
key (or the latest one was an EXIT), EXIT otherwise.
"""

import json
from typing import Any, Callable, Dict, List, Tuple

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents
from residential_api.utils.datetime_utils import get_now_utc, local_day_bounds, parse_local_datetime
from residential_api.utils.exceptions import BadRequestError, NotFoundError
from residential_api.utils.logger import get_logger
from residential_api.utils.query import paginate, search_filter

logger = get_logger(__name__)

SEARCH_FIELDS = ("person", "apartment", "entry_type", "vehicle")
MAIN_GATE = "Main Gate"
QR_METHOD = "QR Code"
VEHICLE_ENTRY_TYPES = ("Resident Vehicle", "Service Provider")


def _required(payload: Dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if not payload.get(k)]
    if missing:
        raise BadRequestError(f"Invalid QR code: missing {', '.join(missing)}", "GateEntryService")
    _strings(payload, *keys)


def _strings(payload: Dict[str, Any], *keys: str) -> None:
    """Present values for keys must be strings."""
    bad = [k for k in keys if payload.get(k) is not None and not isinstance(payload[k], str)]
    if bad:
        raise BadRequestError(f"Invalid QR code: bad {', '.join(bad)}", "GateEntryService")


# Each decoder maps a QR payload to (key, entry). The key selects the
# previous rows the toggle looks at; entry holds the fields of the new row.
Decoded = Tuple[Dict[str, Any], Dict[str, Any]]


def _guest(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "guestName", "hostApartment", "validFrom", "validUntil")
    _strings(payload, "licensePlate", "vehicleType")
    try:
        valid_from = parse_local_datetime(payload["validFrom"])
        valid_until = parse_local_datetime(payload["validUntil"])
    except (ValueError, TypeError):
        raise BadRequestError("Invalid QR code: bad validity window", "GateEntryService")
    now = get_now_utc()
    if now < valid_from or now > valid_until:
        raise BadRequestError("QR Code expired", "GateEntryService")

    if payload.get("licensePlate"):
        vehicle = f"{payload.get('vehicleType')} ({payload['licensePlate']})"
    else:
        vehicle = payload.get("vehicleType") or "None"
    host = db["residents"].find_one({"apartment": payload["hostApartment"]}, {"_id": 1})
    key = {"person": payload["guestName"], "apartment": payload["hostApartment"], "entry_type": "Guest"}
    return key, {**key, "vehicle": vehicle, "resident_id": str(host["_id"]) if host else None}


def _resident(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "residentName", "apartment")
    _strings(payload, "residentId")
    key = {"person": payload["residentName"], "apartment": payload["apartment"], "entry_type": "Resident"}
    return key, {**key, "vehicle": "None", "resident_id": payload.get("residentId")}


def _vehicle(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "residentName", "apartment", "licensePlate")
    _strings(payload, "residentId", "make", "model")
    vehicle = f"{payload.get('make')} {payload.get('model')} ({payload['licensePlate']})"
    key = {
        "person": payload["residentName"],
        "apartment": payload["apartment"],
        "vehicle": vehicle,
        "entry_type": "Resident Vehicle",
    }
    return key, {**key, "resident_id": payload.get("residentId")}


def _delivery(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "riderName", "apartment")
    _strings(payload, "residentId", "companyName")
    key = {"person": payload["riderName"], "apartment": payload["apartment"], "entry_type": "Delivery"}
    return key, {
        **key,
        "vehicle": payload.get("companyName") or "Delivery Vehicle",
        "resident_id": payload.get("residentId"),
    }


def _service_provider(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "providerName")
    key = {"person": payload["providerName"], "entry_type": "Service Provider"}
    return key, {**key, "apartment": "Service Provider", "vehicle": "None", "resident_id": None}


def _employee(payload: Dict[str, Any], db) -> Decoded:
    _required(payload, "employeeName")
    _strings(payload, "department")
    key = {"person": payload["employeeName"], "entry_type": "Employee"}
    return key, {**key, "apartment": payload.get("department") or "Employee", "vehicle": "None", "resident_id": None}


QR_DECODERS: Dict[str, Callable[[Dict[str, Any], Any], Decoded]] = {
    "guest_entry": _guest,
    "resident_entry": _resident,
    "vehicle_entry": _vehicle,
    "delivery_entry": _delivery,
    "service_provider_entry": _service_provider,
    "employee_entry": _employee,
}


class GateEntryService:
    """Service for gate entries using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["gate_entries"]

    def get(self, entry_id: str) -> Dict[str, Any]:
        entry = self.col.find_one(id_query(entry_id))
        if not entry:
            raise NotFoundError("Gate entry not found", "GateEntryService")
        return attach_residents(self.db, [doc_with_id(entry)])[0]

    def list_entries(self, params) -> Tuple[List[Dict[str, Any]], int]:
        query = search_filter(params.search, SEARCH_FIELDS)
        entries, total = paginate(self.col, query, params, default_order="desc")
        return attach_residents(self.db, entries), total

    def _insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = get_now_utc()
        doc = {**fields, "created_at": now, "updated_at": now}
        result = self.col.insert_one(doc)
        return self.get(str(result.inserted_id))

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Manual entry logged by an admin."""
        fields = dict(data)
        fields["gate"] = fields.get("gate") or MAIN_GATE
        fields["method"] = fields.get("method") or "Manual"
        entry = self._insert(fields)
        logger.info(f"[GateEntryService] Manual {entry['type']}: {entry['person']} ({entry['entry_type']})")
        return entry

    def next_direction(self, key: Dict[str, Any]) -> str:
        last = self.col.find_one(key, {"type": 1}, sort=[("created_at", DESCENDING), ("_id", DESCENDING)])
        return "ENTRY" if last is None or last.get("type") == "EXIT" else "EXIT"

    def scan_qr(self, qr_data: str) -> Dict[str, Any]:
        """
        Record a gate passage from scanned QR text.

        Raises:
            BadRequestError: missing data, invalid JSON, unknown type, or an
                expired guest window
        """
        if not qr_data:
            raise BadRequestError("QR code data is required", "GateEntryService")
        try:
            payload = json.loads(qr_data)
        except ValueError:
            raise BadRequestError("QR code data is not valid JSON", "GateEntryService")
        if not isinstance(payload, dict):
            raise BadRequestError("QR code data is not valid JSON", "GateEntryService")

        qr_type = payload.get("type")
        decoder = QR_DECODERS.get(qr_type) if isinstance(qr_type, str) else None
        if decoder is None:
            raise BadRequestError(f"Unknown QR code type: {qr_type}", "GateEntryService")

        key, fields = decoder(payload, self.db)
        direction = self.next_direction(key)
        entry = self._insert({**fields, "type": direction, "gate": MAIN_GATE, "method": QR_METHOD})
        logger.info(f"[GateEntryService] QR {direction}: {entry['person']} ({entry['entry_type']})")
        return entry

    def today_stats(self) -> Dict[str, Any]:
        start, end = local_day_bounds()
        today = {"created_at": {"$gte": start, "$lt": end}}
        entries = self.col.count_documents({**today, "type": "ENTRY"})
        exits = self.col.count_documents({**today, "type": "EXIT"})
        by_type = self.col.aggregate([
            {"$match": today},
            {"$group": {"_id": "$entry_type", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ])
        return {
            "statistics": {
                "total_entries": entries,
                "total_exits": exits,
                "current_occupancy": max(0, entries - exits),
                "guest_entries": self.col.count_documents({**today, "entry_type": "Guest"}),
                "vehicle_entries": self.col.count_documents(
                    {**today, "entry_type": {"$in": list(VEHICLE_ENTRY_TYPES)}}
                ),
            },
            "entry_type_stats": [{"entry_type": t["_id"], "count": t["count"]} for t in by_type],
        }

    def delete(self, entry_id: str) -> None:
        self.get(entry_id)
        self.col.delete_one(id_query(entry_id))
        logger.info(f"[GateEntryService] Gate entry deleted: {entry_id}")
