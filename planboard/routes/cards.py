from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from ..auth import READ, WRITE, Principal, require
from ..db import get_db
from ..errors import NotFound
from ..models import CardCreate, CardOut, CardUpdate, CardView, ChecklistOut, ToDoListOut, to_page
from ..schemas import Page
from ..storage import cards, checklists, todolists
from ..utils import OBJECT_ID_PATTERN

router = APIRouter(prefix="/cards", tags=["cards"])

CardId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


@router.post("", response_model=CardOut, status_code=201)
def create_card(
    payload: CardCreate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    card = cards.create(db, payload.model_dump(mode="json"))
    return CardOut.model_validate(card)


@router.get("", response_model=Page[CardOut])
def list_cards(
    board_id: Optional[str] = Query(default=None, alias="boardId", pattern=OBJECT_ID_PATTERN),
    owner: Optional[str] = Query(default=None, pattern=OBJECT_ID_PATTERN),
    name: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    limit: Optional[int] = None,
    page: Optional[int] = None,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    filter = {"boardId": board_id, "owner": owner, "name": name}
    result = cards.query(db, filter, sort_by=sort_by, limit=limit, page=page)
    return to_page(result, CardOut)


@router.get("/{card_id}", response_model=CardView)
def get_card(
    card_id: CardId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    """The card with its checklists and to-do lists."""
    card = cards.get_by_id(db, card_id)
    if card is None:
        raise NotFound("Card not found")
    return CardView(
        card=CardOut.model_validate(card),
        checklists=[ChecklistOut.model_validate(c) for c in checklists.list_by(db, "card_id", card_id)],
        to_do_lists=[ToDoListOut.model_validate(t) for t in todolists.list_by(db, "card_id", card_id)],
    )


@router.patch("/{card_id}", response_model=CardOut)
def update_card(
    card_id: CardId,
    payload: CardUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    card = cards.update_by_id(db, card_id, payload.model_dump(mode="json", exclude_unset=True))
    return CardOut.model_validate(card)


@router.delete("/{card_id}", status_code=204)
def delete_card(
    card_id: CardId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    cards.delete_by_id(db, card_id)
    return Response(status_code=204)
