"""Customer group repository - Database operations for customer groups"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import CustomerGroup


class GroupRepository:
    """Repository for customer group database operations"""

    @staticmethod
    def get_groups(db: Session) -> list[CustomerGroup]:
        """Get all groups ordered by name"""
        return db.query(CustomerGroup).order_by(CustomerGroup.name, CustomerGroup.id).all()

    @staticmethod
    def get_group_by_id(db: Session, group_id: int) -> Optional[CustomerGroup]:
        return db.query(CustomerGroup).filter(CustomerGroup.id == group_id).first()

    @staticmethod
    def create_group(db: Session, **group_data) -> CustomerGroup:
        group = CustomerGroup(**group_data)
        db.add(group)
        db.commit()
        db.refresh(group)
        return group

    @staticmethod
    def update_group(db: Session, group: CustomerGroup, **fields) -> CustomerGroup:
        for key, value in fields.items():
            if hasattr(group, key):
                setattr(group, key, value)

        db.commit()
        db.refresh(group)
        return group

    @staticmethod
    def set_members(db: Session, group: CustomerGroup, customer_ids: list[int]) -> CustomerGroup:
        """Replace the member list (assigns a new list so the JSON column is flagged dirty)"""
        group.customer_ids = list(dict.fromkeys(customer_ids))
        db.commit()
        db.refresh(group)
        return group

    @staticmethod
    def delete_group(db: Session, group: CustomerGroup) -> None:
        db.delete(group)
        db.commit()
