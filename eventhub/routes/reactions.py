from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, get_caller
from eventhub.core.errors import EventhubError
from eventhub.database.db import get_db
from eventhub.routes.errors import http_error
from eventhub.schemas.recommendations import ReactionOut
from eventhub.services import reactions

router = APIRouter(prefix="/events", tags=["reactions"])


def _toggle(action, db: Session, event_id: int, caller: Caller) -> dict:
    try:
        active = action(db, event_id=event_id, user_id=caller.id)
    except EventhubError as e:
        raise http_error(e)
    return {"event_id": event_id, "active": active}


@router.put("/{event_id}/like", response_model=ReactionOut)
def like(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return _toggle(reactions.like_event, db, event_id, caller)


@router.delete("/{event_id}/like", response_model=ReactionOut)
def unlike(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return _toggle(reactions.unlike_event, db, event_id, caller)


@router.put("/{event_id}/bookmark", response_model=ReactionOut)
def bookmark(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return _toggle(reactions.bookmark_event, db, event_id, caller)


@router.delete("/{event_id}/bookmark", response_model=ReactionOut)
def unbookmark(event_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    return _toggle(reactions.unbookmark_event, db, event_id, caller)
