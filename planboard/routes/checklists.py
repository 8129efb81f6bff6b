from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from ..auth import READ, WRITE, Principal, require
from ..db import get_db
from ..errors import NotFound
from ..models import ChecklistCreate, ChecklistOut, ChecklistUpdate, to_page
from ..schemas import Page
from ..storage import checklists
from ..utils import OBJECT_ID_PATTERN

router = APIRouter(prefix="/checklists", tags=["checklists"])

ChecklistId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


@router.post("", response_model=ChecklistOut, status_code=201)
def create_checklist(
    payload: ChecklistCreate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    checklist = checklists.create(db, payload.model_dump(mode="json"))
    return ChecklistOut.model_validate(checklist)


@router.get("", response_model=Page[ChecklistOut])
def list_checklists(
    card_id: Optional[str] = Query(default=None, alias="cardId", pattern=OBJECT_ID_PATTERN),
    board_id: Optional[str] = Query(default=None, alias="boardId", pattern=OBJECT_ID_PATTERN),
    owner: Optional[str] = Query(default=None, pattern=OBJECT_ID_PATTERN),
    name: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    limit: Optional[int] = None,
    page: Optional[int] = None,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    filter = {"cardId": card_id, "boardId": board_id, "owner": owner, "name": name}
    result = checklists.query(db, filter, sort_by=sort_by, limit=limit, page=page)
    return to_page(result, ChecklistOut)


@router.get("/{checklist_id}", response_model=ChecklistOut)
def get_checklist(
    checklist_id: ChecklistId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    checklist = checklists.get_by_id(db, checklist_id)
    if checklist is None:
        raise NotFound("Checklist not found")
    return ChecklistOut.model_validate(checklist)


@router.patch("/{checklist_id}", response_model=ChecklistOut)
def update_checklist(
    checklist_id: ChecklistId,
    payload: ChecklistUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    checklist = checklists.update_by_id(db, checklist_id, payload.model_dump(mode="json", exclude_unset=True))
    return ChecklistOut.model_validate(checklist)


@router.delete("/{checklist_id}", status_code=204)
def delete_checklist(
    checklist_id: ChecklistId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    checklists.delete_by_id(db, checklist_id)
    return Response(status_code=204)
