from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from ..auth import READ, WRITE, Principal, require
from ..db import get_db
from ..errors import NotFound
from ..models import Status, ToDoListCreate, ToDoListOut, ToDoListUpdate, to_page
from ..schemas import Page
from ..storage import todolists
from ..utils import OBJECT_ID_PATTERN

router = APIRouter(prefix="/todolists", tags=["todolists"])

ToDoListId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


@router.post("", response_model=ToDoListOut, status_code=201)
def create_todolist(
    payload: ToDoListCreate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    todolist = todolists.create(db, payload.model_dump(mode="json"))
    return ToDoListOut.model_validate(todolist)


@router.get("", response_model=Page[ToDoListOut])
def list_todolists(
    card_id: Optional[str] = Query(default=None, alias="cardId", pattern=OBJECT_ID_PATTERN),
    status: Optional[Status] = None,
    name: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    limit: Optional[int] = None,
    page: Optional[int] = None,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    filter = {"cardId": card_id, "status": status, "name": name}
    result = todolists.query(db, filter, sort_by=sort_by, limit=limit, page=page)
    return to_page(result, ToDoListOut)


@router.get("/{todolist_id}", response_model=ToDoListOut)
def get_todolist(
    todolist_id: ToDoListId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    todolist = todolists.get_by_id(db, todolist_id)
    if todolist is None:
        raise NotFound("ToDoList not found")
    return ToDoListOut.model_validate(todolist)


@router.patch("/{todolist_id}", response_model=ToDoListOut)
def update_todolist(
    todolist_id: ToDoListId,
    payload: ToDoListUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    todolist = todolists.update_by_id(db, todolist_id, payload.model_dump(mode="json", exclude_unset=True))
    return ToDoListOut.model_validate(todolist)


@router.delete("/{todolist_id}", status_code=204)
def delete_todolist(
    todolist_id: ToDoListId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    todolists.delete_by_id(db, todolist_id)
    return Response(status_code=204)
