"""
Insights Engine

Pure function of (customers, jobs, equipment, as-of date) producing KPIs,
ranked advisory insights, a 4-week trend and a per-customer profitability
ranking. Only completed jobs take part in financial and time metrics.
"""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Optional

from ...schemas import CustomerRecord, EquipmentRecord, JobRecord, JobStatus
from .schemas import (
    NO_DATA_MESSAGE,
    AlertReason,
    CustomerProfitability,
    EquipmentAlert,
    Insight,
    InsightsReport,
    InsightType,
    KPISet,
    ProfitRating,
    UnderpricedJob,
    WeeklyTrend,
)

HIRING_WEEKLY_HOURS = 35
UNDERPRICED_FACTOR = 0.8
HIGH_DRIVE_PERCENTAGE = 25
LONG_DRIVE_MINUTES = 15
STRONG_HOURLY_RATE = 60
WEAK_HOURLY_RATE = 40
MAINTENANCE_WINDOW_DAYS = 7
TREND_WEEKS = 4


def effective_hourly_rate(job: JobRecord, customer: Optional[CustomerRecord]) -> Optional[float]:
    """Price per hour actually earned on a job; None without a positive duration"""
    if customer is None or not job.total_time or job.total_time <= 0:
        return None
    return customer.price / job.total_time * 60


def trailing_window(today: date, weeks_back: int) -> tuple[date, date]:
    """(exclusive start, inclusive end) of the 7-day window weeks_back weeks ago"""
    end = today - timedelta(days=7 * weeks_back)
    return end - timedelta(days=7), end


def in_window(job: JobRecord, window: tuple[date, date]) -> bool:
    start, end = window
    return start < job.date <= end


def equipment_alerts(equipment: Iterable[EquipmentRecord], today: date) -> list[EquipmentAlert]:
    alerts = []
    for item in equipment:
        days = (item.next_maintenance_date - today).days
        reasons = []
        if days <= MAINTENANCE_WINDOW_DAYS:
            reasons.append(AlertReason.MAINTENANCE_DUE)
        if item.hours_used >= item.alert_threshold:
            reasons.append(AlertReason.HOURS_THRESHOLD)
        if reasons:
            alerts.append(
                EquipmentAlert(
                    equipment_id=item.id,
                    name=item.name,
                    days_until_maintenance=days,
                    hours_used=item.hours_used,
                    alert_threshold=item.alert_threshold,
                    reasons=reasons,
                )
            )
    return alerts


def build_insights(
    customers: Sequence[CustomerRecord],
    jobs: Sequence[JobRecord],
    equipment: Sequence[EquipmentRecord],
    today: date,
) -> InsightsReport:
    completed = [job for job in jobs if job.status is JobStatus.COMPLETED]
    if not completed:
        return InsightsReport(as_of=today, has_data=False, message=NO_DATA_MESSAGE)

    by_id = {customer.id: customer for customer in customers}

    def price_of(job: JobRecord) -> float:
        customer = by_id.get(job.customer_id)
        return customer.price if customer else 0.0

    # Core metrics
    total_revenue = sum(price_of(job) for job in completed)
    total_minutes = sum(job.total_time or 0 for job in completed)
    total_work_hours = total_minutes / 60
    total_drive_minutes = sum(job.drive_time or 0 for job in completed)
    total_drive_hours = total_drive_minutes / 60
    avg_drive_time_per_job = total_drive_minutes / len(completed)
    avg_job_time = total_minutes / len(completed)

    tracked_hours = total_work_hours + total_drive_hours
    drive_time_percentage = total_drive_hours / tracked_hours * 100 if tracked_hours else 0.0
    hourly_rate = total_revenue / total_work_hours if total_work_hours else 0.0

    # Per-job effective rates (jobs without a total time are left out)
    rated_jobs = []
    for job in completed:
        rate = effective_hourly_rate(job, by_id.get(job.customer_id))
        if rate is not None:
            rated_jobs.append((job, rate))

    avg_effective_rate = sum(rate for _, rate in rated_jobs) / len(rated_jobs) if rated_jobs else 0.0
    underpriced = [
        UnderpricedJob(
            job_id=job.id,
            customer_id=job.customer_id,
            customer_name=by_id[job.customer_id].name,
            date=job.date,
            effective_hourly_rate=round(rate, 2),
        )
        for job, rate in rated_jobs
        if rate < avg_effective_rate * UNDERPRICED_FACTOR
    ]

    # Weekly trend, oldest window first
    trend = []
    for weeks_back in reversed(range(TREND_WEEKS)):
        window = trailing_window(today, weeks_back)
        window_jobs = [job for job in completed if in_window(job, window)]
        trend.append(
            WeeklyTrend(
                week=f"Week {TREND_WEEKS - weeks_back}",
                start=window[0],
                end=window[1],
                revenue=sum(price_of(job) for job in window_jobs),
                hours=round(sum(job.total_time or 0 for job in window_jobs) / 60, 1),
                jobs=len(window_jobs),
            )
        )

    current_week = trailing_window(today, 0)
    weekly_work_hours = (
        sum(job.total_time or 0 for job in completed if in_window(job, current_week)) / 60
    )

    # Customer profitability
    profitability = []
    for customer in customers:
        customer_jobs = [job for job in completed if job.customer_id == customer.id]
        timed = [job.total_time for job in customer_jobs if job.total_time and job.total_time > 0]
        if not timed:
            continue
        avg_time = sum(timed) / len(timed)
        if avg_time <= 0:
            continue
        effective_rate = customer.price / avg_time * 60
        profitability.append(
            CustomerProfitability(
                customer_id=customer.id,
                name=customer.name,
                price=customer.price,
                avg_time=round(avg_time, 1),
                effective_rate=round(effective_rate, 2),
                job_count=len(customer_jobs),
                rating=ProfitRating.GOOD
                if effective_rate >= avg_effective_rate
                else ProfitRating.REVIEW,
            )
        )
    profitability.sort(key=lambda row: row.effective_rate, reverse=True)

    alerts = equipment_alerts(equipment, today)

    # Insights, in fixed rule order
    insights: list[Insight] = []

    if weekly_work_hours > HIRING_WEEKLY_HOURS:
        insights.append(
            Insight(
                type=InsightType.HIRING,
                title="Consider Hiring Additional Crew",
                description=(
                    f"You're working {weekly_work_hours:.1f} hours/week. Hiring a crew member "
                    "could help you scale and take on more customers."
                ),
            )
        )

    if underpriced:
        insights.append(
            Insight(
                type=InsightType.PRICING,
                title="Underpriced Properties Detected",
                description=(
                    f"{len(underpriced)} properties are generating below-average hourly rates. "
                    "Consider adjusting pricing."
                ),
            )
        )

    if drive_time_percentage > HIGH_DRIVE_PERCENTAGE:
        insights.append(
            Insight(
                type=InsightType.EFFICIENCY,
                title="High Drive Time Detected",
                description=(
                    f"{drive_time_percentage:.1f}% of your time is spent driving. Consider "
                    "grouping jobs by area or optimizing routes to reduce drive time."
                ),
            )
        )

    if avg_drive_time_per_job > LONG_DRIVE_MINUTES:
        insights.append(
            Insight(
                type=InsightType.ROUTING,
                title="Long Drive Times Between Jobs",
                description=(
                    f"Average drive time is {avg_drive_time_per_job:.1f} minutes per job. "
                    "Try scheduling jobs in the same neighborhood together."
                ),
            )
        )

    if alerts:
        insights.append(
            Insight(
                type=InsightType.MAINTENANCE,
                title="Equipment Maintenance Needed",
                description=(
                    f"{len(alerts)} equipment items need attention soon to avoid downtime."
                ),
            )
        )

    # No recorded work time means no meaningful rate to judge
    if total_work_hours:
        if hourly_rate > STRONG_HOURLY_RATE:
            insights.append(
                Insight(
                    type=InsightType.SUCCESS,
                    title="Excellent Profitability",
                    description=(
                        f"You're earning ${hourly_rate:.2f}/hour on average. Great work!"
                    ),
                )
            )
        elif hourly_rate < WEAK_HOURLY_RATE:
            insights.append(
                Insight(
                    type=InsightType.IMPROVEMENT,
                    title="Improve Hourly Rate",
                    description=(
                        f"Current rate is ${hourly_rate:.2f}/hour. Focus on efficiency or "
                        "adjust pricing to reach $50+/hour."
                    ),
                )
            )

    kpis = KPISet(
        total_revenue=total_revenue,
        hourly_rate=hourly_rate,
        total_work_hours=total_work_hours,
        avg_job_time=avg_job_time,
        total_drive_hours=total_drive_hours,
        avg_drive_time_per_job=avg_drive_time_per_job,
        drive_time_percentage=drive_time_percentage,
        completed_jobs=len(completed),
        weekly_work_hours=weekly_work_hours,
        avg_effective_rate=avg_effective_rate,
    )

    return InsightsReport(
        as_of=today,
        has_data=True,
        kpis=kpis,
        insights=insights,
        weekly_trend=trend,
        customer_profitability=profitability,
        underpriced_jobs=underpriced,
        equipment_alerts=alerts,
    )
