from celery import Celery

from eventhub.core.config import settings
from eventhub.core.redis_config import get_redis_url


def make_celery(app_name: str = "eventhub") -> Celery:
    redis_url = get_redis_url()
    celery = Celery(app_name, broker=redis_url, backend=redis_url, include=["eventhub.tasks"])
    celery.conf.task_serializer = "json"
    celery.conf.result_serializer = "json"
    celery.conf.accept_content = ["json"]
    celery.conf.result_persistent = False
    celery.conf.task_track_started = True
    celery.conf.task_always_eager = settings.celery_task_always_eager
    return celery


celery_app = make_celery()
