from fastapi import APIRouter, Depends, HTTPException

from eventhub.core.auth import Caller, get_caller
from eventhub.core.logging_utils import log_event
from eventhub.tasks import rescore_all_events_task

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/rescore", status_code=202)
def rescore_events(caller: Caller = Depends(get_caller)):
    """Queue recomputation of every stored mood score with the current lexicon."""
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can rescore events")
    result = rescore_all_events_task.delay()
    log_event("rescore_enqueued", task_id=result.id, actor_user_id=caller.id)
    return {"task_id": result.id}
