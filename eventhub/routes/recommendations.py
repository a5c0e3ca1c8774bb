from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, get_optional_caller
from eventhub.database.db import get_db
from eventhub.models.events import TargetAudience
from eventhub.schemas.recommendations import RecommendationsOut, RecommendedEventOut
from eventhub.services.recommendations import (
    DateOption,
    Mood,
    PriceOption,
    RecommendationCriteria,
    recommend_events,
)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

NO_MATCHES_MESSAGE = "NoMatches: no events match the selected criteria"


@router.get("", response_model=RecommendationsOut)
def recommendations(
    age_group: Optional[TargetAudience] = None,
    mood: Optional[Mood] = None,
    location: Optional[str] = None,
    online: Optional[bool] = None,
    date_option: Optional[DateOption] = None,
    specific_date: Optional[date] = None,
    price_option: Optional[PriceOption] = None,
    db: Session = Depends(get_db),
    caller: Optional[Caller] = Depends(get_optional_caller),
):
    criteria = RecommendationCriteria(
        age_group=age_group,
        mood=mood,
        location=location,
        online=online,
        date_option=date_option,
        specific_date=specific_date,
        price_option=price_option,
    )
    results = recommend_events(db, criteria, user_id=caller.id if caller else None)

    events = [
        RecommendedEventOut.model_validate(r.event).model_copy(
            update={"is_liked": r.is_liked, "is_bookmarked": r.is_bookmarked}
        )
        for r in results
    ]
    return {"events": events, "message": None if events else NO_MATCHES_MESSAGE}
