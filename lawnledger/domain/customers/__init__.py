"""Customer domain - customers and equipment"""

from .repository import CustomerRepository, EquipmentRepository

__all__ = ["CustomerRepository", "EquipmentRepository"]
