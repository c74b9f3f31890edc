from fastapi import APIRouter, Depends, status

from residential_api.schemas.common import MessageResponse, PaginationParams, pagination
from residential_api.schemas.employees import (
    EmployeeCreateRequest,
    EmployeeStatusRequest,
    EmployeeUpdateRequest,
)
from residential_api.services.container import employee_service
from residential_api.utils.auth_dependencies import get_current_admin
from residential_api.utils.logger import get_logger
from residential_api.utils.query import pagination_meta

logger = get_logger(__name__)

# Staff management (admin only)
router = APIRouter(
    prefix="/api/employees",
    tags=["Employees"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("")
async def list_employees(params: PaginationParams = Depends(pagination())):
    employees, total = employee_service.list_employees(params)
    return {"employees": employees, "pagination": pagination_meta(params, total)}


@router.get("/departments/list")
async def list_departments():
    return {"departments": employee_service.departments()}


@router.get("/designations/list")
async def list_designations():
    return {"designations": employee_service.designations()}


@router.get("/stats/overview")
async def employee_stats():
    return {"statistics": employee_service.stats_overview()}


@router.get("/{employee_id}")
async def get_employee(employee_id: str):
    return {"employee": employee_service.get(employee_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_employee(body: EmployeeCreateRequest):
    employee = employee_service.create(body.model_dump(exclude_none=True))
    logger.info(f"[API] Employee created: {employee['employee_id']}")
    return {"message": "Employee created successfully", "employee": employee}


@router.patch("/{employee_id}")
async def update_employee(employee_id: str, body: EmployeeUpdateRequest):
    employee = employee_service.update(employee_id, body.model_dump(exclude_unset=True, exclude_none=True))
    return {"message": "Employee updated successfully", "employee": employee}


@router.patch("/{employee_id}/status")
async def set_employee_status(employee_id: str, body: EmployeeStatusRequest):
    employee = employee_service.set_status(employee_id, body.status)
    return {"message": f"Employee status updated to {body.status.lower()}", "employee": employee}


@router.get("/{employee_id}/qr-code")
async def employee_qr_code(employee_id: str):
    return employee_service.qr_code(employee_id)


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(employee_id: str):
    employee_service.delete(employee_id)
    return MessageResponse(message="Employee deleted successfully")
