"""
Celery application for running the decision pipeline off the request path.

Broker/backend: Redis (CELERY_BROKER_URL / CELERY_RESULT_BACKEND env).
"""
from celery import Celery

from autoreply.core.config import settings

celery_app = Celery(
    "autoreply",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    task_default_queue="comments",
    task_routes={"autoreply.like_comment": {"queue": "platform_actions"}},
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
)

celery_app.autodiscover_tasks(["autoreply.worker"])
