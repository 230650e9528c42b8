"""Celery application for background fetch-and-merge runs.

A run can take minutes for a wide roll number range, so the async endpoint
hands it to a worker. Each worker process drives one browser at a time.
"""

from typing import Any, Dict

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from rollfetch.core.config import settings
from rollfetch.core.logging_config import setup_logging as setup_app_logging


def celery_config() -> Dict[str, Any]:
    """Celery settings derived from the application settings."""
    return {
        "task_serializer": "json",
        "accept_content": ["json"],
        "result_serializer": "json",
        "timezone": "UTC",
        "enable_utc": True,
        "task_track_started": True,
        # A reserved batch would wait behind a running browser
        "worker_prefetch_multiplier": 1,
        "task_acks_late": True,
        "task_always_eager": settings.CELERY_TASK_ALWAYS_EAGER,
        "task_eager_propagates": settings.CELERY_TASK_EAGER_PROPAGATES,
    }


def configure_celery_logging(**kwargs: Any) -> None:
    """Use the application's logging config in worker processes.

    Connected to Celery's ``setup_logging`` signal, which also stops Celery
    from installing its own handlers.
    """
    del kwargs  # Signal arguments are not needed
    setup_app_logging()


def create_celery_app() -> Celery:
    """Build the Celery app that runs ``rollfetch.tasks``."""
    app = Celery(
        "rollfetch",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["rollfetch.tasks"],
    )
    app.conf.update(celery_config())
    celery_setup_logging.connect(configure_celery_logging, weak=False)
    return app


celery_app = create_celery_app()
