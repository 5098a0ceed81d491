# ===== detailing/services/analytics/analytics_service.py =====
"""
Month-over-month business metrics for the admin dashboard.

Appointments are bucketed by scheduled_date; deposits by invoice creation
time. A month is the half-open range [first of month, first of next month).
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
import calendar
import logging

from sqlalchemy.orm import Session

from detailing.core.exceptions import ValidationError
from detailing.models.appointment import Appointment
from detailing.models.invoice import Invoice
from detailing.models.service import Service
from detailing.models.user import User, UserStatus

logger = logging.getLogger(__name__)

TOP_SERVICES_LIMIT = 4


def month_start(today: date, offset: int = 0) -> date:
    """First day of the month `offset` months after the month of `today`."""
    month_index = today.year * 12 + (today.month - 1) + offset
    return date(month_index // 12, month_index % 12 + 1, 1)


def percent_change(current: float, prior: float) -> float:
    """Relative change in percent; 0 when there is no prior value to compare with."""
    if prior <= 0:
        return 0.0
    return (current - prior) / prior * 100


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


class AnalyticsService:

    @staticmethod
    def _appointments_between(db: Session, start: date, end: date) -> List[Appointment]:
        return db.query(Appointment).filter(
            Appointment.scheduled_date >= start.isoformat(),
            Appointment.scheduled_date < end.isoformat()
        ).all()

    @staticmethod
    def _deposits(db: Session, today: date) -> Tuple[float, float]:
        """Paid deposits of invoices created this month and last month."""
        this_month = month_start(today)
        last_month = month_start(today, -1)
        next_month = month_start(today, 1)

        current = prior = 0.0
        for invoice in db.query(Invoice).filter(Invoice.deposit_paid.is_(True)).all():
            created = _as_date(invoice.created_at)
            if created is None:
                continue
            if this_month <= created < next_month:
                current += invoice.deposit_amount or 0
            elif last_month <= created < this_month:
                prior += invoice.deposit_amount or 0
        return current, prior

    @staticmethod
    def get_monthly_stats(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        this_month = month_start(today)

        current = AnalyticsService._appointments_between(db, this_month, month_start(today, 1))
        prior = AnalyticsService._appointments_between(db, month_start(today, -1), this_month)

        current_revenue = sum(a.total_price for a in current)
        prior_revenue = sum(a.total_price for a in prior)

        active_customers = db.query(User).filter(User.status == UserStatus.ACTIVE).count()

        total_duration = sum(a.duration for a in current)
        avg_hours = total_duration / len(current) / 60 if current else 0.0

        deposits, prior_deposits = AnalyticsService._deposits(db, today)

        return {
            "total_revenue": current_revenue,
            "revenue_change": f"{percent_change(current_revenue, prior_revenue):.1f}",
            "bookings_count": len(current),
            "bookings_change": f"{percent_change(len(current), len(prior)):.1f}",
            "active_customers": active_customers,
            "avg_service_time": f"{avg_hours:.1f}",
            "total_deposits": deposits,
            "deposits_change": f"{percent_change(deposits, prior_deposits):.1f}",
        }

    @staticmethod
    def get_dashboard_analytics(db: Session, months: int = 6, today: Optional[date] = None) -> Dict[str, Any]:
        if months < 1:
            raise ValidationError("months must be at least 1")

        today = today or date.today()
        this_month = month_start(today)
        last_month = month_start(today, -1)

        # Revenue and bookings per month, oldest first
        monthly_data = []
        for offset in range(-(months - 1), 1):
            start = month_start(today, offset)
            appointments = AnalyticsService._appointments_between(db, start, month_start(today, offset + 1))
            monthly_data.append({
                "month": calendar.month_abbr[start.month],
                "revenue": sum(a.total_price for a in appointments),
                "bookings": len(appointments),
            })

        current = AnalyticsService._appointments_between(db, this_month, month_start(today, 1))
        prior = AnalyticsService._appointments_between(db, last_month, this_month)

        top_services = []
        for service in db.query(Service).all():
            service_id = str(service.id)
            bookings = sum(1 for a in current if service_id in (a.service_ids or []))
            prior_bookings = sum(1 for a in prior if service_id in (a.service_ids or []))
            change = percent_change(bookings, prior_bookings)
            top_services.append({
                "name": service.name,
                "bookings": bookings,
                "trend": "up" if change >= 0 else "down",
                "change": f"{'+' if change >= 0 else ''}{change:.0f}%",
            })
        # Stable sort keeps catalog order among ties
        top_services.sort(key=lambda s: s["bookings"], reverse=True)
        top_services = top_services[:TOP_SERVICES_LIMIT]

        users = db.query(User).all()
        new_customers = sum(
            1 for u in users
            if _as_date(u.created_at) is not None and _as_date(u.created_at) >= this_month
        )
        returning_customers = sum(1 for u in users if (u.times_serviced or 0) > 1)
        retention_rate = returning_customers / len(users) * 100 if users else 0.0

        deposits, prior_deposits = AnalyticsService._deposits(db, today)

        return {
            "monthly_data": monthly_data,
            "top_services": top_services,
            "customer_insights": {
                "new_customers": new_customers,
                "returning_customers": returning_customers,
                "retention_rate": f"{retention_rate:.0f}",
            },
            "total_deposits": deposits,
            "deposits_change": f"{percent_change(deposits, prior_deposits):.1f}",
        }
