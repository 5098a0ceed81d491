from datetime import date
from types import SimpleNamespace

import pytest
from kombu.exceptions import OperationalError

from detailing.core.exceptions import AccessDeniedError, NotFoundError, SlotUnavailableError, ValidationError
from detailing.models import Appointment, Invoice, User, Vehicle
from detailing.services.appointment.appointment_service import AppointmentService
from detailing.services.catalog.catalog_service import DepositSettingsService
from detailing.services.notification import notification_service
from detailing.services.invoice.invoice_service import InvoiceService

from tests.conftest import MONDAY


class _Recorder:
    def __init__(self):
        self.calls = []

    def delay(self, *args):
        self.calls.append(args)


@pytest.fixture
def queued(monkeypatch):
    """Capture enqueued notification tasks instead of talking to Celery."""
    fake_tasks = SimpleNamespace(
        send_appointment_confirmation=_Recorder(),
        send_invoice_email=_Recorder(),
        send_welcome_email=_Recorder(),
        send_status_update=_Recorder(),
        send_admin_review_notification=_Recorder(),
        send_sms=_Recorder(),
    )
    monkeypatch.setattr(notification_service, "notification_tasks", fake_tasks)
    monkeypatch.setattr(notification_service.settings, "NOTIFICATIONS_ENABLED", True)
    return fake_tasks


def _book(db, user, vehicle, services, scheduled_time="10:00", **kwargs):
    return AppointmentService.create_appointment(
        db=db,
        user=user,
        vehicle_ids=[str(vehicle.id)],
        service_ids=[str(s.id) for s in services],
        scheduled_date=kwargs.pop("scheduled_date", MONDAY),
        scheduled_time=scheduled_time,
        street="12 Elm St",
        city="Springfield",
        state="IL",
        zip="62701",
        **kwargs
    )


def test_create_appointment_prices_and_invoices(db, client_user, vehicle, services, monday_hours):
    appointment = _book(db, client_user, vehicle, [services["wash"], services["interior"]])

    # Small car: wash uses its small price, interior falls back to base price
    assert appointment.total_price == 110.0
    assert appointment.duration == 150
    assert appointment.status == "pending"
    assert appointment.created_by == client_user.id

    invoice = db.query(Invoice).filter(Invoice.appointment_id == appointment.id).one()
    assert invoice.invoice_number == "INV-0001"
    assert invoice.status == "draft"
    assert invoice.total == 110.0
    assert invoice.deposit_amount == 50.0
    assert invoice.remaining_balance == 60.0
    assert invoice.due_date == "2025-07-02"
    assert [item["service_name"] for item in invoice.items] == ["Exterior Wash", "Interior Detail"]
    assert invoice.items[0]["unit_price"] == 30.0


def test_price_multiplies_by_vehicle_count(db, client_user, vehicle, services, monday_hours):
    truck = Vehicle(user_id=client_user.id, year=2018, make="Ford", model="F-150", size="large")
    db.add(truck)
    db.commit()

    appointment = AppointmentService.create_appointment(
        db=db,
        user=client_user,
        vehicle_ids=[str(vehicle.id), str(truck.id)],
        service_ids=[str(services["wash"].id)],
        scheduled_date=MONDAY,
        scheduled_time="08:00",
        street="12 Elm St", city="Springfield", state="IL", zip="62701",
    )

    # Priced by the first vehicle's size (small) for both vehicles
    assert appointment.total_price == 60.0
    invoice = InvoiceService.get_by_appointment(db, appointment.id)
    assert invoice.deposit_amount == 60.0
    assert invoice.remaining_balance == 0.0


def test_booking_revalidates_slot(db, client_user, vehicle, services, monday_hours):
    _book(db, client_user, vehicle, [services["wash"]], scheduled_time="10:00")

    with pytest.raises(SlotUnavailableError) as exc_info:
        _book(db, client_user, vehicle, [services["wash"]], scheduled_time="10:30")

    assert exc_info.value.reason == "Time slot already booked"
    assert db.query(Appointment).count() == 1
    assert db.query(Invoice).count() == 1


def test_booking_rejected_outside_hours(db, client_user, vehicle, services, monday_hours):
    with pytest.raises(SlotUnavailableError) as exc_info:
        _book(db, client_user, vehicle, [services["interior"]], scheduled_time="19:00")
    assert exc_info.value.reason == "Outside business hours"


def test_invoice_numbers_are_sequential(db, client_user, vehicle, services, monday_hours):
    first = _book(db, client_user, vehicle, [services["wash"]], scheduled_time="08:00")
    second = _book(db, client_user, vehicle, [services["wash"]], scheduled_time="10:00")
    AppointmentService.delete_appointment(db, first.id)
    third = _book(db, client_user, vehicle, [services["wash"]], scheduled_time="12:00")

    numbers = [InvoiceService.get_by_appointment(db, a.id).invoice_number for a in (second, third)]
    assert numbers == ["INV-0002", "INV-0003"]


def test_custom_deposit_settings(db, client_user, vehicle, services, monday_hours):
    DepositSettingsService.upsert(db, 20.0)

    appointment = _book(db, client_user, vehicle, [services["wash"]])
    assert InvoiceService.get_by_appointment(db, appointment.id).deposit_amount == 20.0


def test_client_cannot_book_for_someone_else(db, client_user, other_client, vehicle, services, monday_hours):
    with pytest.raises(AccessDeniedError):
        _book(db, client_user, vehicle, [services["wash"]], customer_id=other_client.id)


def test_admin_can_book_for_customer(db, admin, client_user, vehicle, services, monday_hours):
    appointment = _book(db, admin, vehicle, [services["wash"]], customer_id=client_user.id)

    assert appointment.user_id == client_user.id
    assert appointment.created_by == admin.id


def test_vehicle_must_belong_to_customer(db, other_client, vehicle, services, monday_hours):
    with pytest.raises(AccessDeniedError):
        _book(db, other_client, vehicle, [services["wash"]])


def test_unknown_service_is_rejected(db, client_user, vehicle, monday_hours):
    with pytest.raises(NotFoundError):
        AppointmentService.create_appointment(
            db=db, user=client_user, vehicle_ids=[str(vehicle.id)],
            service_ids=["6f1c1d3e-0000-4000-8000-000000000000"],
            scheduled_date=MONDAY, scheduled_time="10:00",
            street="x", city="x", state="x", zip="x",
        )


def test_booking_enqueues_confirmation(db, client_user, vehicle, services, monday_hours, queued):
    appointment = _book(db, client_user, vehicle, [services["wash"]])

    (payload,), = queued.send_appointment_confirmation.calls
    assert payload["appointment_id"] == str(appointment.id)
    assert payload["email"] == "casey@example.com"
    assert payload["display_time"] == "10:00 AM"
    assert payload["service_names"] == ["Exterior Wash"]
    assert len(queued.send_sms.calls) == 1


def test_no_notifications_when_disabled(db, client_user, vehicle, services, monday_hours, queued, monkeypatch):
    monkeypatch.setattr(notification_service.settings, "NOTIFICATIONS_ENABLED", False)

    _book(db, client_user, vehicle, [services["wash"]])
    assert queued.send_appointment_confirmation.calls == []


# ============================================================================
# Status changes
# ============================================================================

def test_cancellation_count_tracks_transitions(db, admin, client_user, make_appointment):
    appointment = make_appointment(client_user, MONDAY)

    AppointmentService.update_status(db, appointment.id, "cancelled", admin)
    db.refresh(client_user)
    assert client_user.cancellation_count == 1

    AppointmentService.update_status(db, appointment.id, "confirmed", admin)
    db.refresh(client_user)
    assert client_user.cancellation_count == 0


def test_cancellation_count_never_negative(db, admin, client_user, make_appointment):
    appointment = make_appointment(client_user, MONDAY, status="cancelled")

    AppointmentService.update_status(db, appointment.id, "pending", admin)
    db.refresh(client_user)
    assert client_user.cancellation_count == 0


def test_completion_updates_customer_stats(db, admin, client_user, make_appointment):
    appointment = make_appointment(client_user, MONDAY, total_price=150.0, status="in_progress")

    AppointmentService.update_status(db, appointment.id, "completed", admin)

    customer = db.query(User).filter(User.id == client_user.id).one()
    assert customer.times_serviced == 1
    assert customer.total_spent == 150.0


def test_reopening_completed_job_reverses_stats(db, admin, client_user, make_appointment):
    appointment = make_appointment(client_user, MONDAY, total_price=100.0, status="in_progress")

    AppointmentService.update_status(db, appointment.id, "completed", admin)
    AppointmentService.update_status(db, appointment.id, "confirmed", admin)
    db.refresh(client_user)
    assert (client_user.times_serviced, client_user.total_spent) == (0, 0.0)

    AppointmentService.update_status(db, appointment.id, "completed", admin)
    db.refresh(client_user)
    assert (client_user.times_serviced, client_user.total_spent) == (1, 100.0)


def test_booking_survives_unreachable_broker(db, client_user, vehicle, services, monday_hours, queued, monkeypatch):
    def broker_down(*args):
        raise OperationalError("broker unreachable")

    monkeypatch.setattr(queued.send_appointment_confirmation, "delay", broker_down)
    monkeypatch.setattr(queued.send_sms, "delay", broker_down)

    appointment = _book(db, client_user, vehicle, [services["wash"]])

    assert appointment.status == "pending"
    assert db.query(Appointment).count() == 1
    assert InvoiceService.get_by_appointment(db, appointment.id) is not None


def test_confirming_with_paid_deposit_sends_invoice(db, admin, client_user, vehicle, services, monday_hours, queued):
    appointment = _book(db, client_user, vehicle, [services["wash"]])
    invoice = InvoiceService.get_by_appointment(db, appointment.id)
    InvoiceService.update_deposit_status(db, invoice.id, True)

    AppointmentService.update_status(db, appointment.id, "confirmed", admin)

    db.refresh(invoice)
    assert invoice.status == "sent"
    (payload,), = queued.send_invoice_email.calls
    assert payload["invoice_number"] == invoice.invoice_number
    assert queued.send_status_update.calls[0][0]["status"] == "confirmed"


def test_confirming_without_deposit_keeps_draft(db, admin, client_user, vehicle, services, monday_hours, queued):
    appointment = _book(db, client_user, vehicle, [services["wash"]])

    AppointmentService.update_status(db, appointment.id, "confirmed", admin)

    assert InvoiceService.get_by_appointment(db, appointment.id).status == "draft"
    assert queued.send_invoice_email.calls == []


def test_update_status_requires_admin_and_valid_status(db, admin, client_user, make_appointment):
    appointment = make_appointment(client_user, MONDAY)

    with pytest.raises(AccessDeniedError):
        AppointmentService.update_status(db, appointment.id, "confirmed", client_user)
    with pytest.raises(ValidationError):
        AppointmentService.update_status(db, appointment.id, "done", admin)


# ============================================================================
# Reschedule, queries, delete
# ============================================================================

def test_reschedule_excludes_itself(db, client_user, monday_hours, make_appointment):
    appointment = make_appointment(client_user, MONDAY, "10:00", 60)

    moved = AppointmentService.reschedule(db, appointment.id, MONDAY, "10:30", client_user)

    assert moved.scheduled_time == "10:30"
    assert moved.status == "confirmed"


def test_reschedule_into_taken_slot_fails(db, client_user, other_client, monday_hours, make_appointment):
    mine = make_appointment(client_user, MONDAY, "10:00", 60)
    make_appointment(other_client, MONDAY, "14:00", 60)

    with pytest.raises(SlotUnavailableError):
        AppointmentService.reschedule(db, mine.id, MONDAY, "13:30", client_user)

    assert db.query(Appointment).filter(Appointment.id == mine.id).one().scheduled_time == "10:00"


def test_reschedule_requires_owner(db, client_user, other_client, monday_hours, make_appointment):
    appointment = make_appointment(client_user, MONDAY, "10:00", 60)

    with pytest.raises(AccessDeniedError):
        AppointmentService.reschedule(db, appointment.id, MONDAY, "12:00", other_client)


def test_user_appointments_split(db, client_user, make_appointment):
    past = make_appointment(client_user, "2025-05-01", status="completed")
    upcoming = make_appointment(client_user, "2025-06-10", status="confirmed")
    cancelled = make_appointment(client_user, "2025-06-12", status="cancelled")

    split = AppointmentService.get_user_appointments(db, client_user, today=date(2025, 6, 2))

    assert [a.id for a in split["upcoming"]] == [upcoming.id]
    assert {a.id for a in split["past"]} == {past.id, cancelled.id}


def test_get_by_user_is_owner_or_admin(db, admin, client_user, other_client, make_appointment):
    make_appointment(client_user, MONDAY)

    assert len(AppointmentService.get_by_user(db, client_user.id, client_user)) == 1
    assert len(AppointmentService.get_by_user(db, client_user.id, admin)) == 1
    with pytest.raises(AccessDeniedError):
        AppointmentService.get_by_user(db, client_user.id, other_client)


def test_list_and_calendar_filters(db, client_user, make_appointment):
    make_appointment(client_user, "2025-06-02", status="pending")
    make_appointment(client_user, "2025-06-03", status="cancelled")
    make_appointment(client_user, "2025-06-20", status="confirmed")

    assert len(AppointmentService.list_appointments(db, status="pending")) == 1
    assert len(AppointmentService.list_appointments(db, scheduled_date="2025-06-03")) == 1

    calendar = AppointmentService.get_calendar_view(db, "2025-06-01", "2025-06-07")
    assert [a.scheduled_date for a in calendar] == ["2025-06-02"]


def test_delete_appointment_removes_unpaid_invoice(db, client_user, vehicle, services, monday_hours):
    appointment = _book(db, client_user, vehicle, [services["wash"]])

    AppointmentService.delete_appointment(db, appointment.id)

    assert db.query(Appointment).count() == 0
    assert db.query(Invoice).count() == 0


def test_delete_appointment_with_paid_invoice_is_rejected(db, client_user, vehicle, services, monday_hours):
    appointment = _book(db, client_user, vehicle, [services["wash"]])
    invoice = InvoiceService.get_by_appointment(db, appointment.id)
    InvoiceService.update_status(db, invoice.id, "paid")

    with pytest.raises(ValidationError):
        AppointmentService.delete_appointment(db, appointment.id)
