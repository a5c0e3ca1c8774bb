"""
Test the event lifecycle service: creation, edits, moderation and re-scoring.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, UserStatus
from eventhub.core.errors import (
    CapacityUnderBooked,
    DuplicateTag,
    EventNotFound,
    InvalidSchedule,
    InvalidTagName,
    NotAuthorized,
    TagListInvalid,
    TagNotFound,
)
from eventhub.models.bookings import Booking
from eventhub.models.events import Event, EventStatus
from eventhub.models.tags import Tag
from eventhub.schemas.events import EventCreate, EventUpdate
from eventhub.services import events as event_service
from eventhub.services.bookings import create_booking
from eventhub.services.scoring import MoodLexicon
from eventhub.services.tags import delete_tag, get_or_create_tag, get_tag, resolve_tags, update_tag

OWNER = Caller(id=1, email="owner@example.com")
STRANGER = Caller(id=2, email="stranger@example.com")
ADMIN = Caller(id=99, email="admin@example.com", status=UserStatus.ADMIN)
VERIFIED = Caller(id=3, email="verified@example.com", status=UserStatus.VERIFIED_USER)

LEXICON = MoodLexicon(
    word_scores={"happy": 3, "party": 2, "sad": -2, "jazz": 1},
    event_type_scores={"PARTY": 2, "LECTURE": -1},
)


def _payload(**overrides) -> EventCreate:
    start = datetime(2030, 8, 1, 20, 0)
    values = dict(
        name="happy party",
        description="",
        event_type="party",
        tags=[],
        location="Kyiv",
        start_date=start,
        end_date=start + timedelta(hours=4),
        total_seats=10,
    )
    values.update(overrides)
    return EventCreate(**values)


class TestCreateEvent:
    """Test event creation."""

    def test_create_scores_and_fills_capacity(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        assert event.id is not None
        assert event.owner_id == OWNER.id
        assert event.event_type == "PARTY"
        assert event.mood_score == 3 + 2 + 2
        assert event.total_seats == 10
        assert event.available_seats == 10
        assert event.status == EventStatus.CREATED.value

    def test_verified_user_events_are_auto_verified(self, db_session: Session):
        event = event_service.create_event(db_session, VERIFIED, _payload(), LEXICON)

        assert event.status == EventStatus.VERIFIED.value

    def test_admin_events_still_need_moderation(self, db_session: Session):
        event = event_service.create_event(db_session, ADMIN, _payload(), LEXICON)

        assert event.status == EventStatus.CREATED.value

    def test_tags_are_resolved_and_scored(self, db_session: Session):
        get_or_create_tag(db_session, "Jazz")
        db_session.commit()

        event = event_service.create_event(
            db_session, OWNER, _payload(name="evening", tags=["JAZZ", "sad", "jazz"]), LEXICON
        )

        assert sorted(event.tag_names) == ["Jazz", "sad"]
        assert db_session.query(Tag).count() == 2
        assert event.mood_score == 2 + 1 - 2

    def test_end_before_start_is_rejected_by_schema(self):
        start = datetime(2030, 8, 1, 20, 0)
        with pytest.raises(ValueError):
            _payload(start_date=start, end_date=start)


    def test_aware_dates_are_stored_as_utc(self, db_session: Session):
        kyiv = timezone(timedelta(hours=3))
        payload = _payload(
            start_date=datetime(2030, 8, 1, 20, 0, tzinfo=kyiv),
            end_date=datetime(2030, 8, 1, 21, 0),
        )

        event = event_service.create_event(db_session, OWNER, payload, LEXICON)

        assert event.start_date == datetime(2030, 8, 1, 17, 0)
        assert event.end_date == datetime(2030, 8, 1, 21, 0)


class TestListEvents:
    """Test event listings."""

    def test_list_events_soonest_first(self, db_session: Session):
        september = _payload(start_date=datetime(2030, 9, 1), end_date=datetime(2030, 9, 2))
        later = event_service.create_event(db_session, OWNER, september, LEXICON)
        sooner = event_service.create_event(db_session, STRANGER, _payload(), LEXICON)

        assert [e.id for e in event_service.list_events(db_session)] == [sooner.id, later.id]

    def test_list_owner_events(self, db_session: Session):
        mine = event_service.create_event(db_session, OWNER, _payload(), LEXICON)
        event_service.create_event(db_session, STRANGER, _payload(), LEXICON)

        assert [e.id for e in event_service.list_owner_events(db_session, OWNER.id)] == [mine.id]
        assert event_service.list_owner_events(db_session, 404) == []


class TestUpdateEvent:
    """Test owner/admin edits."""

    def test_update_rescores(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        updated = event_service.update_event(
            db_session, OWNER, event.id, EventUpdate(name="sad lecture", event_type="lecture"), LEXICON
        )

        assert updated.name == "sad lecture"
        assert updated.event_type == "LECTURE"
        assert updated.mood_score == -2 - 1

    def test_update_tags(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(tags=["sad"]), LEXICON)

        updated = event_service.update_event(db_session, OWNER, event.id, EventUpdate(tags=["jazz"]), LEXICON)

        assert updated.tag_names == ["jazz"]
        assert updated.mood_score == 3 + 2 + 2 + 1

    def test_update_capacity_keeps_bookings(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(total_seats=10), LEXICON)
        create_booking(db_session, event_id=event.id, user_id=5, tickets=6)

        updated = event_service.update_event(db_session, OWNER, event.id, EventUpdate(total_seats=8), LEXICON)

        assert updated.total_seats == 8
        assert updated.available_seats == 2

    def test_update_capacity_below_bookings_rolls_back(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(total_seats=10), LEXICON)
        create_booking(db_session, event_id=event.id, user_id=5, tickets=6)

        with pytest.raises(CapacityUnderBooked):
            event_service.update_event(
                db_session, OWNER, event.id, EventUpdate(name="renamed", total_seats=5), LEXICON
            )

        db_session.refresh(event)
        assert event.name == "happy party"
        assert event.total_seats == 10
        assert event.available_seats == 4

    def test_admin_can_update(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        updated = event_service.update_event(db_session, ADMIN, event.id, EventUpdate(price=25.0), LEXICON)

        assert updated.price == 25.0

    def test_stranger_cannot_update(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        with pytest.raises(NotAuthorized):
            event_service.update_event(db_session, STRANGER, event.id, EventUpdate(price=1.0), LEXICON)

    def test_invalid_schedule(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        with pytest.raises(InvalidSchedule):
            event_service.update_event(
                db_session, OWNER, event.id, EventUpdate(end_date=datetime(2020, 1, 1)), LEXICON
            )

    def test_unknown_event(self, db_session: Session):
        with pytest.raises(EventNotFound):
            event_service.update_event(db_session, OWNER, 99999, EventUpdate(price=1.0), LEXICON)


class TestDeleteAndModerate:
    """Test deletion and moderation."""

    def test_owner_deletes_event_and_bookings(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)
        create_booking(db_session, event_id=event.id, user_id=5, tickets=2)
        event_id = event.id

        event_service.delete_event(db_session, OWNER, event_id)

        with pytest.raises(EventNotFound):
            event_service.get_event(db_session, event_id)
        assert db_session.query(Booking).count() == 0

    def test_stranger_cannot_delete(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        with pytest.raises(NotAuthorized):
            event_service.delete_event(db_session, STRANGER, event.id)

    def test_admin_verifies_and_declines(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        assert event_service.verify_event(db_session, ADMIN, event.id).status == "VERIFIED"
        assert event_service.decline_event(db_session, ADMIN, event.id).status == "DECLINED"

    @pytest.mark.parametrize("caller", [OWNER, VERIFIED])
    def test_only_admin_moderates(self, db_session: Session, caller):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)

        with pytest.raises(NotAuthorized):
            event_service.verify_event(db_session, caller, event.id)


class TestRescore:
    """Test recomputing stored scores with a new lexicon."""

    def test_rescore_event(self, db_session: Session):
        event = event_service.create_event(db_session, OWNER, _payload(), LEXICON)
        louder = MoodLexicon(word_scores={"happy": 10}, event_type_scores={})

        assert event_service.rescore_event(db_session, event.id, louder) == 10
        db_session.refresh(event)
        assert event.mood_score == 10

    def test_rescore_all_events(self, db_session: Session):
        event_service.create_event(db_session, OWNER, _payload(), LEXICON)
        event_service.create_event(db_session, OWNER, _payload(name="sad party"), LEXICON)

        count = event_service.rescore_all_events(db_session, MoodLexicon())

        assert count == 2
        assert {e.mood_score for e in db_session.query(Event)} == {0}


class TestTags:
    """Test tag resolution."""

    def test_get_or_create_is_case_insensitive(self, db_session: Session):
        first = get_or_create_tag(db_session, "Live Music")
        second = get_or_create_tag(db_session, "  live MUSIC ")

        assert first.id == second.id
        assert first.name == "Live Music"

    @pytest.mark.parametrize("tags", ["jazz", ["jazz", 3], {"name": "jazz"}])
    def test_tag_list_invalid(self, db_session: Session, tags):
        with pytest.raises(TagListInvalid):
            resolve_tags(db_session, tags)

    def test_blank_and_duplicate_names_collapse(self, db_session: Session):
        tags = resolve_tags(db_session, ["Rock", " ", "rock", "Pop"])

        assert [t.name for t in tags] == ["Rock", "Pop"]

    def test_blank_name_is_rejected(self, db_session: Session):
        with pytest.raises(InvalidTagName):
            get_or_create_tag(db_session, "   ")

    def test_rename_rescores_tagged_events(self, db_session: Session):
        event = event_service.create_event(
            db_session, OWNER, _payload(name="evening gathering", event_type="SEMINAR", tags=["fun"])
        )
        assert event.mood_score == 4
        tag = get_tag(db_session, event.tags[0].id)

        renamed = update_tag(db_session, ADMIN, tag.id, "  Sad ")

        assert renamed.name == "Sad"
        assert renamed.slug == "sad"
        db_session.refresh(event)
        assert event.tag_names == ["Sad"]
        assert event.mood_score == -2

    def test_rename_onto_existing_tag(self, db_session: Session):
        jazz = get_or_create_tag(db_session, "Jazz")
        get_or_create_tag(db_session, "Rock")
        db_session.commit()

        with pytest.raises(DuplicateTag):
            update_tag(db_session, ADMIN, jazz.id, "rock")
        # same slug, new spelling
        assert update_tag(db_session, ADMIN, jazz.id, "JAZZ").name == "JAZZ"

    def test_only_admin_manages_tags(self, db_session: Session):
        tag = get_or_create_tag(db_session, "Jazz")
        db_session.commit()

        with pytest.raises(NotAuthorized):
            update_tag(db_session, OWNER, tag.id, "Blues")
        with pytest.raises(NotAuthorized):
            delete_tag(db_session, OWNER, tag.id)

    def test_delete_detaches_and_rescores(self, db_session: Session):
        event = event_service.create_event(
            db_session, OWNER, _payload(name="evening gathering", event_type="SEMINAR", tags=["fun", "music"])
        )
        assert event.mood_score == 4 + 1
        fun = next(t for t in event.tags if t.name == "fun")

        delete_tag(db_session, ADMIN, fun.id)

        db_session.refresh(event)
        assert event.tag_names == ["music"]
        assert event.mood_score == 1
        with pytest.raises(TagNotFound):
            get_tag(db_session, fun.id)
