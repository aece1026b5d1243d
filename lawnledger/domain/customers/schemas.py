"""Customer domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

from ...schemas import ServiceFrequency
from ...shared.validators import normalize_phone


class CustomerCreate(BaseModel):
    """Schema for creating a new customer"""

    name: str
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    price: float = 0.0
    squareFootage: int = 0
    frequency: ServiceFrequency = ServiceFrequency.WEEKLY
    notes: Optional[str] = None
    lastServiceDate: Optional[date] = None
    nextServiceDate: Optional[date] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Customer name is required")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price cannot be negative")
        return v


class EquipmentCreate(BaseModel):
    """Schema for registering a piece of equipment"""

    name: str
    lastMaintenanceDate: Optional[date] = None
    nextMaintenanceDate: date
    hoursUsed: float = 0.0
    alertThreshold: float = 0.0
