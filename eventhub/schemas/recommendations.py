from pydantic import BaseModel

from eventhub.schemas.events import EventOut


class RecommendedEventOut(EventOut):
    is_liked: bool = False
    is_bookmarked: bool = False


class RecommendationsOut(BaseModel):
    events: list[RecommendedEventOut]
    message: str | None = None


class ReactionOut(BaseModel):
    event_id: int
    active: bool
