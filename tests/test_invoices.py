from datetime import date, datetime, timezone

import pytest

from detailing.core.exceptions import AccessDeniedError, ValidationError
from detailing.models import Invoice, InvoiceCounter
from detailing.services.invoice.invoice_service import InvoiceService


@pytest.fixture
def invoice_for(db, make_appointment):
    def _make(user, status="draft", total=100.0, deposit_paid=False):
        appointment = make_appointment(user, "2025-06-02", total_price=total)
        invoice = Invoice(
            appointment_id=appointment.id,
            user_id=user.id,
            invoice_number=InvoiceService.next_invoice_number(db),
            items=[],
            subtotal=total,
            tax=0.0,
            total=total,
            status=status,
            due_date="2025-07-02",
            deposit_amount=50.0,
            deposit_paid=deposit_paid,
            remaining_balance=total - 50.0,
        )
        db.add(invoice)
        db.commit()
        db.refresh(invoice)
        return invoice

    return _make


def test_counter_row_is_created_and_incremented(db):
    assert InvoiceService.next_invoice_number(db) == "INV-0001"
    assert InvoiceService.next_invoice_number(db) == "INV-0002"
    db.commit()

    assert db.query(InvoiceCounter).one().last_value == 2


def test_counter_continues_past_four_digits(db):
    db.add(InvoiceCounter(id=1, last_value=9999))
    db.commit()

    assert InvoiceService.next_invoice_number(db) == "INV-10000"


def test_listing_is_newest_first_past_four_digits(db, client_user, invoice_for):
    db.add(InvoiceCounter(id=1, last_value=9998))
    db.commit()
    older = invoice_for(client_user)
    newer = invoice_for(client_user)
    older.created_at = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
    newer.created_at = datetime(2025, 6, 2, 9, 0, tzinfo=timezone.utc)
    db.commit()

    expected = ["INV-10000", "INV-9999"]
    assert [i.invoice_number for i in InvoiceService.list_invoices(db)] == expected
    assert [i.invoice_number for i in InvoiceService.get_user_invoices(db, client_user)] == expected


def test_mark_paid_defaults_paid_date_to_today(db, client_user, invoice_for):
    invoice = invoice_for(client_user, status="sent")

    updated = InvoiceService.update_status(db, invoice.id, "paid")
    assert updated.status == "paid"
    assert updated.paid_date == date.today().isoformat()

    explicit = InvoiceService.update_status(db, invoice_for(client_user).id, "paid", paid_date="2025-06-10")
    assert explicit.paid_date == "2025-06-10"


def test_update_status_rejects_unknown_status(db, client_user, invoice_for):
    with pytest.raises(ValidationError):
        InvoiceService.update_status(db, invoice_for(client_user).id, "void")


def test_deposit_status(db, client_user, invoice_for):
    invoice = invoice_for(client_user)

    updated = InvoiceService.update_deposit_status(db, invoice.id, True, status="sent")
    assert updated.deposit_paid is True
    assert updated.status == "sent"


def test_paid_invoice_cannot_be_deleted(db, client_user, invoice_for):
    paid = invoice_for(client_user, status="paid")
    draft = invoice_for(client_user)

    with pytest.raises(ValidationError):
        InvoiceService.delete_invoice(db, paid.id)

    InvoiceService.delete_invoice(db, draft.id)
    assert db.query(Invoice).count() == 1


def test_get_invoice_is_owner_or_admin(db, admin, client_user, other_client, invoice_for):
    invoice = invoice_for(client_user)

    assert InvoiceService.get_invoice(db, invoice.id, client_user).id == invoice.id
    assert InvoiceService.get_invoice(db, invoice.id, admin).id == invoice.id
    with pytest.raises(AccessDeniedError):
        InvoiceService.get_invoice(db, invoice.id, other_client)


def test_list_and_user_invoices(db, client_user, other_client, invoice_for):
    invoice_for(client_user, status="sent")
    invoice_for(client_user, status="paid")
    invoice_for(other_client, status="sent")

    assert len(InvoiceService.list_invoices(db)) == 3
    assert len(InvoiceService.list_invoices(db, status="sent")) == 2
    numbers = [i.invoice_number for i in InvoiceService.get_user_invoices(db, client_user)]
    assert numbers == ["INV-0002", "INV-0001"]


def test_summary_stats(db, client_user, invoice_for):
    invoice_for(client_user, status="paid", total=200.0, deposit_paid=True)
    invoice_for(client_user, status="sent", total=120.0)
    invoice_for(client_user, status="overdue", total=80.0, deposit_paid=True)
    invoice_for(client_user, status="draft", total=60.0)

    stats = InvoiceService.get_summary_stats(db)

    assert stats["total_invoices"] == 4
    assert stats["by_status"] == {"draft": 1, "sent": 1, "paid": 1, "overdue": 1}
    assert stats["paid_amount"] == 200.0
    assert stats["outstanding_amount"] == 200.0
    assert stats["deposits_collected"] == 100.0
