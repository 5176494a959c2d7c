"""Celery application. Start a worker with ``celery -A eventflow worker -l INFO``."""

import os
import typing as t

import structlog
from celery import Celery
from celery.signals import task_postrun, task_prerun

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "eventflow.settings")

app = Celery("eventflow")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


def _observability_enabled() -> bool:
    from django.conf import settings

    return bool(settings.ENABLE_OBSERVABILITY)


@task_prerun.connect
def bind_task_context(task_id: str, task: t.Any, *args: t.Any, **kwargs: t.Any) -> None:
    """Tag log lines emitted by a task with its id, name and retry count."""
    if not _observability_enabled():
        return
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        task_id=task_id,
        task_name=task.name,
        retries=getattr(task.request, "retries", 0),
    )


@task_postrun.connect
def clear_task_context(*args: t.Any, **kwargs: t.Any) -> None:
    if _observability_enabled():
        structlog.contextvars.clear_contextvars()
