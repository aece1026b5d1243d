"""Customer service - customer and equipment records"""

import logging

from fastapi import HTTPException

from ...exceptions import GatewayError
from ...schemas import CustomerDraft, CustomerRecord, EquipmentDraft, EquipmentRecord
from ...services.workspace import Workspace
from ...shared.dates import next_service_date
from .schemas import CustomerCreate, EquipmentCreate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service layer for customer and equipment operations"""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def get_customers(self) -> tuple[CustomerRecord, ...]:
        return self.workspace.customers.snapshot()

    def get_equipment(self) -> tuple[EquipmentRecord, ...]:
        return self.workspace.equipment.snapshot()

    async def create_customer(self, data: CustomerCreate) -> CustomerRecord:
        """Create a customer; the next service date defaults to last service + frequency"""
        logger.info(f"📥 Creating customer: {data.name}")
        upcoming = data.nextServiceDate or next_service_date(data.lastServiceDate, data.frequency)
        draft = CustomerDraft(
            name=data.name.strip(),
            address=data.address.strip(),
            phone=data.phone,
            email=data.email,
            price=data.price,
            square_footage=data.squareFootage,
            frequency=data.frequency,
            notes=data.notes,
            last_service_date=data.lastServiceDate,
            next_service_date=upcoming,
        )
        try:
            customer = await self.workspace.gateway.create_customer(draft)
        except GatewayError as e:
            logger.error(f"❌ Error creating customer {data.name}: {e}")
            raise HTTPException(status_code=502, detail="Failed to create customer")

        self.workspace.customers.apply(customer)
        await self.workspace.refresh_quietly(self.workspace.customers)
        logger.info(f"✅ Customer created: {customer.id}")
        return customer

    async def create_equipment(self, data: EquipmentCreate) -> EquipmentRecord:
        draft = EquipmentDraft(
            name=data.name.strip(),
            last_maintenance_date=data.lastMaintenanceDate,
            next_maintenance_date=data.nextMaintenanceDate,
            hours_used=data.hoursUsed,
            alert_threshold=data.alertThreshold,
        )
        try:
            item = await self.workspace.gateway.create_equipment(draft)
        except GatewayError as e:
            logger.error(f"❌ Error creating equipment {data.name}: {e}")
            raise HTTPException(status_code=502, detail="Failed to create equipment")

        self.workspace.equipment.apply(item)
        await self.workspace.refresh_quietly(self.workspace.equipment)
        logger.info(f"✅ Equipment created: {item.id}")
        return item

    async def refresh(self) -> None:
        """Re-fetch every collection from the database"""
        try:
            await self.workspace.refresh_all()
        except GatewayError as e:
            logger.error(f"❌ Error refreshing data: {e}")
            raise HTTPException(status_code=502, detail="Failed to refresh data")
