import pytest

from detailing.services.email import email_service
from detailing.services.email.email_service import EmailService
from detailing.tasks import notification_tasks


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def sendmail(self, sender, recipients, message):
        FakeSMTP.sent.append((sender, recipients, message))

    def quit(self):
        pass


@pytest.fixture
def smtp(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def test_confirmation_email_is_rendered(smtp):
    EmailService.send_appointment_confirmation({
        "customer_name": "Casey",
        "email": "casey@example.com",
        "date": "2025-06-02",
        "display_time": "10:00 AM",
        "service_names": ["Exterior Wash", "Interior Detail"],
        "address": "12 Elm St, Springfield, IL 62701",
        "total_price": 110.0,
    })

    (sender, recipients, message), = smtp.sent
    assert recipients == ["casey@example.com"]
    assert "Appointment confirmation - 2025-06-02" in message
    assert "Exterior Wash, Interior Detail" in message


def test_invoice_email_lists_items(smtp):
    EmailService.send_invoice({
        "invoice_number": "INV-0007",
        "email": "casey@example.com",
        "items": [{"service_name": "Exterior Wash", "quantity": 2, "total_price": 60.0}],
        "total": 60.0,
        "deposit_amount": 50.0,
        "due_date": "2025-07-02",
    })

    (_, _, message), = smtp.sent
    assert "INV-0007" in message
    assert "Exterior Wash x2: $60.00" in message


def test_retry_uses_exponential_backoff():
    class FakeTask:
        class request:
            retries = 2

        def retry(self, exc, countdown):
            self.countdown = countdown
            return RuntimeError("retry scheduled")

    task = FakeTask()
    with pytest.raises(RuntimeError):
        notification_tasks._retry(task, ValueError("smtp down"), "test email")

    assert task.countdown == 240


def test_sms_skipped_without_twilio_credentials():
    assert notification_tasks.send_sms("+15555550100", "hello") == {"status": "skipped"}
