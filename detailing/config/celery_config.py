"""Celery application factory"""
from celery import Celery

from detailing.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery app used for outbound notifications"""
    app = Celery(
        "detailing",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["detailing.tasks.notification_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_routes={
            "detailing.tasks.notification_tasks.*": {"queue": "notifications"},
        },
    )

    return app


celery_app = create_celery_app()
