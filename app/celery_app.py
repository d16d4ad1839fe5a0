"""Celery application bootstrap used by workers and FastAPI."""

from __future__ import annotations

from celery import Celery
from kombu import Exchange, Queue

from app.config import settings


celery_app = Celery(
    "cake_order",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.mail"],
)

celery_app.conf.update(
    task_default_queue=settings.CELERY_DEFAULT_QUEUE,
    task_default_exchange="cake_order",
    task_default_routing_key="cake_order.default",
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_soft_time_limit=settings.CELERY_TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_queues=[
        Queue(
            settings.CELERY_DEFAULT_QUEUE,
            Exchange("cake_order"),
            routing_key="cake_order.default",
        ),
        Queue("mail", Exchange("cake_order"), routing_key="cake_order.mail"),
    ],
    task_routes={
        "app.tasks.mail.*": {"queue": "mail", "routing_key": "cake_order.mail"},
    },
    broker_connection_retry_on_startup=True,
)


__all__ = ["celery_app"]
