from eventhub.core.celery_config import celery_app
from eventhub.database.db import SessionLocal
from eventhub.services.events import rescore_all_events, rescore_event


@celery_app.task(bind=True)
def rescore_event_task(self, event_id: int) -> int:
    """Recompute and store one event's mood score."""
    db = SessionLocal()
    try:
        return rescore_event(db, event_id)
    finally:
        db.close()


@celery_app.task(bind=True)
def rescore_all_events_task(self) -> int:
    """Recompute every stored mood score, e.g. after the lexicon file changed."""
    db = SessionLocal()
    try:
        return rescore_all_events(db)
    finally:
        db.close()
