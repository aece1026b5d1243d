#!/usr/bin/env python3
"""
Script to load demo customers, groups, jobs and equipment into the configured database
"""

import asyncio
from datetime import date, timedelta

from lawnledger.database import Base, SessionLocal, engine
from lawnledger.schemas import (
    CustomerDraft,
    EquipmentDraft,
    GroupDraft,
    JobDraft,
    JobStatus,
    ServiceFrequency,
)
from lawnledger.services.gateway import SqlAlchemyGateway

CUSTOMERS = [
    ("Johnson House", "1234 Maple Street, Springfield, IL 62701", "(217) 555-0123", 5000, 45, ServiceFrequency.WEEKLY, "Gate code: 1234. Dog in backyard - call before entering."),
    ("Smith Estate", "5678 Oak Avenue, Springfield, IL 62702", "(217) 555-0456", 12000, 95, ServiceFrequency.WEEKLY, "Large property with multiple flower beds and trees."),
    ("Martinez Property", "2345 Pine Road, Springfield, IL 62703", "(217) 555-0789", 3500, 35, ServiceFrequency.BIWEEKLY, None),
    ("Williams Home", "8901 Elm Court, Springfield, IL 62704", "(217) 555-0234", 7500, 55, ServiceFrequency.WEEKLY, "Pool equipment in backyard. Please be careful around it."),
    ("Brown Residence", "3456 Cedar Lane, Springfield, IL 62705", "(217) 555-0567", 4200, 40, ServiceFrequency.WEEKLY, "Steep slope in front yard - use caution."),
    ("Davis Property", "6789 Birch Drive, Springfield, IL 62706", "(217) 555-0890", 6000, 48, ServiceFrequency.MONTHLY, None),
]

# (customer index, days ago, total, mow, trim, edge, blow, drive)
COMPLETED_JOBS = [
    (0, 2, 50, 30, 10, 5, 5, 12),
    (1, 3, 110, 70, 20, 10, 10, 18),
    (2, 6, 40, 25, 8, 4, 3, 9),
    (3, 9, 65, 40, 12, 8, 5, 14),
    (4, 10, 55, 35, 10, 5, 5, 20),
    (0, 9, 48, 30, 9, 5, 4, 11),
    (1, 17, 105, 68, 18, 10, 9, 16),
    (5, 24, 60, 38, 11, 6, 5, 22),
]


async def seed():
    Base.metadata.create_all(bind=engine)
    gateway = SqlAlchemyGateway(SessionLocal)
    today = date.today()

    print("🌱 Seeding demo data...\n")

    if await gateway.list_customers():
        print("⚠️ Customers already exist - skipping seed")
        return

    north = await gateway.create_customer_group(
        GroupDraft(name="North Springfield", work_time_minutes=180, color="#16a34a")
    )
    south = await gateway.create_customer_group(GroupDraft(name="South Springfield", color="#9333ea"))
    print(f"✅ Created groups: {north.name}, {south.name}")

    customers = []
    for index, (name, address, phone, sqft, price, frequency, notes) in enumerate(CUSTOMERS):
        customer = await gateway.create_customer(
            CustomerDraft(
                name=name,
                address=address,
                phone=phone,
                price=price,
                square_footage=sqft,
                frequency=frequency,
                notes=notes,
                last_service_date=today - timedelta(days=2 + index),
                next_service_date=today + timedelta(days=index + 1),
            )
        )
        customers.append(customer)
    print(f"✅ Created {len(customers)} customers")

    # Keep customer.group_id and the group's member list in step
    for customer, group in zip(customers[:4], [north, north, south, south]):
        await gateway.update_customer(customer.model_copy(update={"group_id": group.id}))
        await gateway.add_customer_to_group(group.id, customer.id)
    print("✅ Assigned 4 customers to groups")

    for index, days_ago, total, mow, trim, edge, blow, drive in COMPLETED_JOBS:
        await gateway.add_job(
            JobDraft(
                customer_id=customers[index].id,
                date=today - timedelta(days=days_ago),
                status=JobStatus.COMPLETED,
                total_time=total,
                mow_time=mow,
                trim_time=trim,
                edge_time=edge,
                blow_time=blow,
                drive_time=drive,
            )
        )

    # One scheduled anchor job per customer, on its next service date
    for customer in customers:
        await gateway.add_job(
            JobDraft(
                customer_id=customer.id,
                date=today + timedelta(days=customers.index(customer) + 1),
                scheduled_time="09:00",
            )
        )
    print(f"✅ Created {len(COMPLETED_JOBS)} completed and {len(customers)} scheduled jobs")

    await gateway.create_equipment(
        EquipmentDraft(
            name="Zero-turn mower",
            last_maintenance_date=today - timedelta(days=85),
            next_maintenance_date=today + timedelta(days=5),
            hours_used=240,
            alert_threshold=250,
        )
    )
    await gateway.create_equipment(
        EquipmentDraft(
            name="String trimmer",
            next_maintenance_date=today + timedelta(days=40),
            hours_used=80,
            alert_threshold=75,
        )
    )
    print("✅ Created 2 equipment items")

    print(f"\n{'='*60}")
    print("✅ Demo data ready")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    try:
        asyncio.run(seed())
    except Exception as e:
        print(f"❌ Error: {e}")
        import traceback

        traceback.print_exc()
