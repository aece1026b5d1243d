from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class CustomerGroup(Base):
    """Geographic grouping of customers worked as one route"""

    __tablename__ = "customer_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    work_time_minutes = Column(Integer, default=0, nullable=False)  # Manual estimate, 0 = unset
    color = Column(String(7), nullable=True)  # e.g., #RRGGBB
    notes = Column(Text, nullable=True)
    # Denormalized mirror of Customer.group_id
    customer_ids = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    price = Column(Float, nullable=False, default=0.0)  # Per visit
    square_footage = Column(Integer, nullable=False, default=0)
    frequency = Column(String(20), nullable=False, default="weekly")  # weekly, biweekly, monthly
    notes = Column(Text, nullable=True)
    last_service_date = Column(Date, nullable=True)
    next_service_date = Column(Date, nullable=True)
    group_id = Column(
        Integer, ForeignKey("customer_groups.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    jobs = relationship("Job", back_populates="customer", passive_deletes=True)


class Job(Base):
    """A single visit to a customer property"""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date = Column(Date, nullable=False, index=True)  # Plain calendar date, no timezone

    # Status workflow: scheduled → in-progress → completed
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    scheduled_time = Column(String(10), nullable=True)  # HH:MM format

    # Durations in minutes
    total_time = Column(Integer, nullable=True)
    mow_time = Column(Integer, nullable=True)
    trim_time = Column(Integer, nullable=True)
    edge_time = Column(Integer, nullable=True)
    blow_time = Column(Integer, nullable=True)
    drive_time = Column(Integer, nullable=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="jobs")


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    last_maintenance_date = Column(Date, nullable=True)
    next_maintenance_date = Column(Date, nullable=False)
    hours_used = Column(Float, nullable=False, default=0.0)
    alert_threshold = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, server_default=func.now())
