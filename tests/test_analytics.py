from datetime import date, datetime, timezone

import pytest

from detailing.core.exceptions import ValidationError
from detailing.models import Invoice, Service, UserStatus
from detailing.services.analytics.analytics_service import AnalyticsService, month_start, percent_change

TODAY = date(2025, 6, 15)


def _paid_deposit(db, appointment, amount, created_at):
    db.add(Invoice(
        appointment_id=appointment.id,
        user_id=appointment.user_id,
        invoice_number=f"INV-{created_at:%m%d%H%M%S}",
        items=[],
        subtotal=appointment.total_price,
        total=appointment.total_price,
        status="sent",
        due_date="2025-07-30",
        deposit_amount=amount,
        deposit_paid=True,
        remaining_balance=appointment.total_price - amount,
        created_at=created_at,
    ))
    db.commit()


def test_month_start_crosses_year_boundaries():
    assert month_start(date(2025, 1, 20), -1) == date(2024, 12, 1)
    assert month_start(date(2025, 12, 5), 1) == date(2026, 1, 1)
    assert month_start(date(2025, 6, 15), -5) == date(2025, 1, 1)


def test_percent_change_with_zero_prior():
    assert percent_change(500, 0) == 0.0
    assert percent_change(150, 100) == 50.0


def test_monthly_stats(db, client_user, make_appointment):
    june_a = make_appointment(client_user, "2025-06-02", duration=120, total_price=200.0)
    make_appointment(client_user, "2025-06-20", duration=60, total_price=100.0)
    may = make_appointment(client_user, "2025-05-10", duration=60, total_price=200.0)
    # Next month is not part of the current month
    make_appointment(client_user, "2025-07-01", duration=60, total_price=999.0)

    _paid_deposit(db, june_a, 75.0, datetime(2025, 6, 3, 10, 0, tzinfo=timezone.utc))
    _paid_deposit(db, may, 50.0, datetime(2025, 5, 11, 10, 0, tzinfo=timezone.utc))

    stats = AnalyticsService.get_monthly_stats(db, today=TODAY)

    assert stats["total_revenue"] == 300.0
    assert stats["bookings_count"] == 2
    assert stats["revenue_change"] == "50.0"
    assert stats["bookings_change"] == "100.0"
    assert stats["avg_service_time"] == "1.5"
    assert stats["total_deposits"] == 75.0
    assert stats["deposits_change"] == "50.0"


def test_zero_prior_month_reports_zero_change(db, client_user, make_appointment):
    make_appointment(client_user, "2025-06-02", total_price=500.0)

    stats = AnalyticsService.get_monthly_stats(db, today=TODAY)

    assert stats["total_revenue"] == 500.0
    assert stats["revenue_change"] == "0.0"
    assert stats["bookings_change"] == "0.0"
    assert stats["deposits_change"] == "0.0"


def test_revenue_drop_is_negative(db, client_user, make_appointment):
    make_appointment(client_user, "2025-06-02", total_price=75.0)
    make_appointment(client_user, "2025-05-02", total_price=100.0)

    assert AnalyticsService.get_monthly_stats(db, today=TODAY)["revenue_change"] == "-25.0"


def test_empty_month(db):
    stats = AnalyticsService.get_monthly_stats(db, today=TODAY)

    assert stats["total_revenue"] == 0
    assert stats["bookings_count"] == 0
    assert stats["avg_service_time"] == "0.0"
    assert stats["active_customers"] == 0


def test_active_customers_counts_active_users(db, client_user, other_client):
    other_client.status = UserStatus.INACTIVE
    db.commit()

    assert AnalyticsService.get_monthly_stats(db, today=TODAY)["active_customers"] == 1


def test_dashboard_monthly_series(db, client_user, make_appointment):
    make_appointment(client_user, "2025-04-30", total_price=80.0)
    make_appointment(client_user, "2025-06-01", total_price=120.0)
    make_appointment(client_user, "2025-06-30", total_price=30.0)

    data = AnalyticsService.get_dashboard_analytics(db, months=3, today=TODAY)

    assert data["monthly_data"] == [
        {"month": "Apr", "revenue": 80.0, "bookings": 1},
        {"month": "May", "revenue": 0, "bookings": 0},
        {"month": "Jun", "revenue": 150.0, "bookings": 2},
    ]


def test_dashboard_top_services(db, client_user, services, make_appointment):
    wash, interior = services["wash"], services["interior"]
    make_appointment(client_user, "2025-06-02", service_ids=[wash.id])
    make_appointment(client_user, "2025-06-03", service_ids=[wash.id, interior.id])
    make_appointment(client_user, "2025-05-02", service_ids=[wash.id])
    make_appointment(client_user, "2025-05-03", service_ids=[interior.id])
    make_appointment(client_user, "2025-05-04", service_ids=[interior.id])

    top = AnalyticsService.get_dashboard_analytics(db, today=TODAY)["top_services"]

    assert top == [
        {"name": "Exterior Wash", "bookings": 2, "trend": "up", "change": "+100%"},
        {"name": "Interior Detail", "bookings": 1, "trend": "down", "change": "-50%"},
    ]


def test_dashboard_top_services_capped_at_four(db, client_user, make_appointment):
    for index in range(6):
        db.add(Service(name=f"Service {index}", description="", base_price=10.0, duration=30))
    db.commit()

    top = AnalyticsService.get_dashboard_analytics(db, today=TODAY)["top_services"]
    assert len(top) == 4
    assert all(s["change"] == "+0%" and s["trend"] == "up" for s in top)


def test_customer_insights(db, client_user, other_client, admin):
    client_user.created_at = datetime(2025, 6, 5, tzinfo=timezone.utc)
    client_user.times_serviced = 3
    other_client.created_at = datetime(2025, 3, 1, tzinfo=timezone.utc)
    other_client.times_serviced = 1
    admin.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    db.commit()

    insights = AnalyticsService.get_dashboard_analytics(db, today=TODAY)["customer_insights"]

    assert insights == {"new_customers": 1, "returning_customers": 1, "retention_rate": "33"}


def test_retention_with_no_users(db):
    data = AnalyticsService.get_dashboard_analytics(db, today=TODAY)

    assert data["customer_insights"]["retention_rate"] == "0"
    assert data["top_services"] == []
    assert len(data["monthly_data"]) == 6


def test_dashboard_rejects_bad_month_count(db):
    with pytest.raises(ValidationError):
        AnalyticsService.get_dashboard_analytics(db, months=0, today=TODAY)
