"""Customer repository - Database operations for customers and equipment"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Customer, Equipment


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def get_customers(db: Session) -> list[Customer]:
        """Get all customers, in creation order"""
        return db.query(Customer).order_by(Customer.id).all()

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: int) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.id == customer_id).first()

    @staticmethod
    def create_customer(db: Session, **customer_data) -> Customer:
        customer = Customer(**customer_data)
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def replace_customer(db: Session, customer: Customer, **fields) -> Customer:
        """Overwrite every given field, including explicit None values"""
        for key, value in fields.items():
            if hasattr(customer, key):
                setattr(customer, key, value)

        db.commit()
        db.refresh(customer)
        return customer


class EquipmentRepository:
    """Repository for equipment database operations"""

    @staticmethod
    def get_equipment(db: Session) -> list[Equipment]:
        return db.query(Equipment).order_by(Equipment.id).all()

    @staticmethod
    def create_equipment(db: Session, **equipment_data) -> Equipment:
        equipment = Equipment(**equipment_data)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment
