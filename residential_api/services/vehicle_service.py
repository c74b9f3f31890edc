"""
Vehicle Service

Vehicles registered by residents or service providers. Resident vehicles
carry a ``vehicle_entry`` QR payload for the gate.
"""

import json
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from residential_api.config import Config
from residential_api.db.mongo import doc_with_id, docs_with_id, get_database, id_query
from residential_api.services.lookups import attach_residents
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import ConflictError, NotFoundError
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)


def vehicle_qr_payload(vehicle: Dict[str, Any], resident: Dict[str, Any]) -> str:
    return json.dumps({
        "type": "vehicle_entry",
        "vehicleId": vehicle["id"],
        "residentId": resident["id"],
        "residentName": resident["name"],
        "apartment": resident["apartment"],
        "make": vehicle["make"],
        "model": vehicle["model"],
        "licensePlate": vehicle["license_plate"],
        "vehicleType": vehicle["vehicle_type"],
        "color": vehicle.get("color"),
    })


class VehicleService:
    """Service for managing vehicles using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["vehicles"]

    def get(self, vehicle_id: str) -> Dict[str, Any]:
        vehicle = self.col.find_one(id_query(vehicle_id))
        if not vehicle:
            raise NotFoundError("Vehicle not found", "VehicleService")
        return doc_with_id(vehicle)

    def list_vehicles(
        self,
        resident_id: Optional[str] = None,
        service_provider_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """All vehicles, or only those owned by the given resident / provider."""
        query: Dict[str, Any] = {}
        if resident_id:
            query["resident_id"] = resident_id
        if service_provider_id:
            query["service_provider_id"] = service_provider_id
        vehicles = docs_with_id(self.col.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))
        return attach_residents(self.db, vehicles)

    def create(
        self,
        data: Dict[str, Any],
        resident: Optional[Dict[str, Any]] = None,
        service_provider_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Register a vehicle for a resident (with QR payload) or a service provider."""
        if self.col.find_one({"license_plate": data["license_plate"]}, {"_id": 1}):
            raise ConflictError("Vehicle with this license plate already exists", "VehicleService")
        now = get_now_utc()
        doc = dict(data)
        doc.update(
            resident_id=resident["id"] if resident else None,
            service_provider_id=service_provider_id,
            qr_code=None,
            created_at=now,
            updated_at=now,
        )
        result = self.col.insert_one(doc)
        vehicle = self.get(str(result.inserted_id))
        if resident:
            qr_code = vehicle_qr_payload(vehicle, resident)
            self.col.update_one(id_query(vehicle["id"]), {"$set": {"qr_code": qr_code}})
            vehicle["qr_code"] = qr_code
        logger.info(f"[VehicleService] Vehicle registered: {doc['license_plate']}")
        return vehicle

    def qr_code(self, vehicle_id: str) -> Dict[str, Any]:
        """Stored QR payload; rebuilt from the owning resident when missing."""
        vehicle = self.get(vehicle_id)
        qr_code = vehicle.get("qr_code")
        if not qr_code and vehicle.get("resident_id"):
            resident = doc_with_id(self.db["residents"].find_one(id_query(vehicle["resident_id"])))
            if resident:
                qr_code = vehicle_qr_payload(vehicle, resident)
                self.col.update_one(id_query(vehicle_id), {"$set": {"qr_code": qr_code}})
        if not qr_code:
            raise NotFoundError("No QR code for this vehicle", "VehicleService")
        return {"qr_code": qr_code, "vehicle": vehicle}

    def delete(self, vehicle_id: str) -> None:
        vehicle = self.get(vehicle_id)
        self.col.delete_one(id_query(vehicle_id))
        logger.info(f"[VehicleService] Vehicle deleted: {vehicle['license_plate']}")
