"""Customer router - FastAPI endpoints for customers and equipment"""

import logging

from fastapi import APIRouter, Depends

from ...schemas import CustomerRecord, EquipmentRecord
from ...services.workspace import Workspace, current_workspace
from .schemas import CustomerCreate, EquipmentCreate
from .service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])
equipment_router = APIRouter(prefix="/equipment", tags=["Equipment"])


def get_customer_service(workspace: Workspace = Depends(current_workspace)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(workspace)


@router.get("", response_model=list[CustomerRecord])
async def get_customers(service: CustomerService = Depends(get_customer_service)):
    return list(service.get_customers())


@router.post("", response_model=CustomerRecord, status_code=201)
async def create_customer(
    data: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.create_customer(data)


@router.post("/refresh")
async def refresh_data(service: CustomerService = Depends(get_customer_service)):
    """Re-fetch customers, jobs, groups and equipment"""
    await service.refresh()
    ws = service.workspace
    return {
        "customers": len(ws.customers),
        "jobs": len(ws.jobs),
        "groups": len(ws.groups),
        "equipment": len(ws.equipment),
    }


@equipment_router.get("", response_model=list[EquipmentRecord])
async def get_equipment(service: CustomerService = Depends(get_customer_service)):
    return list(service.get_equipment())


@equipment_router.post("", response_model=EquipmentRecord, status_code=201)
async def create_equipment(
    data: EquipmentCreate,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.create_equipment(data)
