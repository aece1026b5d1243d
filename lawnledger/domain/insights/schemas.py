"""Insights domain schemas - derived metrics and recommendations"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel

NO_DATA_MESSAGE = "Complete jobs to see insights and recommendations"


class InsightType(str, Enum):
    HIRING = "hiring"
    PRICING = "pricing"
    EFFICIENCY = "efficiency"
    ROUTING = "routing"
    MAINTENANCE = "maintenance"
    SUCCESS = "success"
    IMPROVEMENT = "improvement"


class ProfitRating(str, Enum):
    GOOD = "good"
    REVIEW = "review"


class AlertReason(str, Enum):
    MAINTENANCE_DUE = "maintenance_due"
    HOURS_THRESHOLD = "hours_threshold"


class KPISet(BaseModel):
    total_revenue: float
    hourly_rate: float
    total_work_hours: float
    avg_job_time: float  # minutes
    total_drive_hours: float
    avg_drive_time_per_job: float  # minutes
    drive_time_percentage: float
    completed_jobs: int
    weekly_work_hours: float
    avg_effective_rate: float


class Insight(BaseModel):
    type: InsightType
    title: str
    description: str


class WeeklyTrend(BaseModel):
    week: str
    start: date  # exclusive
    end: date  # inclusive
    revenue: float
    hours: float
    jobs: int


class CustomerProfitability(BaseModel):
    customer_id: int
    name: str
    price: float
    avg_time: float
    effective_rate: float
    job_count: int
    rating: ProfitRating


class UnderpricedJob(BaseModel):
    job_id: int
    customer_id: int
    customer_name: str
    date: date
    effective_hourly_rate: float


class EquipmentAlert(BaseModel):
    equipment_id: int
    name: str
    days_until_maintenance: int
    hours_used: float
    alert_threshold: float
    reasons: list[AlertReason]


class InsightsReport(BaseModel):
    as_of: date
    has_data: bool
    message: Optional[str] = None
    kpis: Optional[KPISet] = None
    insights: list[Insight] = []
    weekly_trend: list[WeeklyTrend] = []
    customer_profitability: list[CustomerProfitability] = []
    underpriced_jobs: list[UnderpricedJob] = []
    equipment_alerts: list[EquipmentAlert] = []

    def top_profitability(self, n: int = 5) -> list[CustomerProfitability]:
        return self.customer_profitability[:n]

    def insight_types(self) -> list[InsightType]:
        return [insight.type for insight in self.insights]
