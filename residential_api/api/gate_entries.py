from fastapi import APIRouter, Depends, status

from residential_api.schemas.common import MessageResponse, PaginationParams, pagination
from residential_api.schemas.gate_entries import GateEntryCreateRequest, QrScanRequest
from residential_api.services.container import gate_entry_service
from residential_api.utils.auth_dependencies import get_current_admin
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Gate log (admin / security desk)
router = APIRouter(
    prefix="/api/gate-entries",
    tags=["Gate Entries"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("")
async def list_gate_entries(params: PaginationParams = Depends(pagination(default_limit=20))):
    entries, total = gate_entry_service.list_entries(params)
    return {"entries": entries, "pagination": pagination_meta(params, total)}


@router.post("/qr-scan", status_code=status.HTTP_201_CREATED)
async def scan_qr(body: QrScanRequest):
    """
    Log a gate passage from a scanned QR code. The direction toggles per
    person: first scan is an ENTRY, the next an EXIT, and so on.
    """
    entry = gate_entry_service.scan_qr(body.qr_data)
    return {
        "message": f"{entry['entry_type']} {entry['type'].lower()} recorded",
        "entry": entry,
        "type": entry["type"],
        "person": entry["person"],
        "apartment": entry["apartment"],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_gate_entry(body: GateEntryCreateRequest):
    entry = gate_entry_service.create(body.model_dump())
    return {"message": "Gate entry created successfully", "entry": entry}


@router.get("/stats/today")
async def gate_stats_today():
    return gate_entry_service.today_stats()


@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_gate_entry(entry_id: str):
    gate_entry_service.delete(entry_id)
    return MessageResponse(message="Gate entry deleted successfully")
