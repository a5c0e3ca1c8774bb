from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.core.auth import Caller, get_caller
from eventhub.core.errors import EventhubError
from eventhub.database.db import get_db
from eventhub.routes.errors import http_error
from eventhub.schemas.tags import TagCreate, TagOut, TagUpdate
from eventhub.services import tags as tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagOut])
def all_tags(db: Session = Depends(get_db)):
    return tag_service.list_tags(db)


@router.post("", response_model=TagOut)
def create_tag(payload: TagCreate, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        tag = tag_service.get_or_create_tag(db, payload.name)
    except EventhubError as e:
        raise http_error(e)
    db.commit()
    db.refresh(tag)
    return tag


@router.get("/{tag_id}", response_model=TagOut)
def get_tag(tag_id: int, db: Session = Depends(get_db)):
    try:
        return tag_service.get_tag(db, tag_id)
    except EventhubError as e:
        raise http_error(e)


@router.patch("/{tag_id}", response_model=TagOut)
def update_tag(
    tag_id: int,
    payload: TagUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    try:
        return tag_service.update_tag(db, caller, tag_id, payload.name)
    except EventhubError as e:
        raise http_error(e)


@router.delete("/{tag_id}", status_code=204)
def delete_tag(tag_id: int, db: Session = Depends(get_db), caller: Caller = Depends(get_caller)):
    try:
        tag_service.delete_tag(db, caller, tag_id)
    except EventhubError as e:
        raise http_error(e)
