from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from ..auth import READ, WRITE, Principal, require
from ..db import get_db
from ..errors import NotFound
from ..models import BoardCreate, BoardOut, BoardUpdate, CardOut, to_page
from ..schemas import Page
from ..storage import boards, cards
from ..utils import OBJECT_ID_PATTERN

router = APIRouter(prefix="/boards", tags=["boards"])

BoardId = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


@router.post("", response_model=BoardOut, status_code=201)
def create_board(
    payload: BoardCreate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    board = boards.create(db, payload.model_dump(mode="json"))
    return BoardOut.model_validate(board)


@router.get("", response_model=Page[BoardOut])
def list_boards(
    owner: Optional[str] = Query(default=None, pattern=OBJECT_ID_PATTERN),
    name: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    limit: Optional[int] = None,
    page: Optional[int] = None,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    result = boards.query(db, {"owner": owner, "name": name}, sort_by=sort_by, limit=limit, page=page)
    return to_page(result, BoardOut)


@router.get("/{board_id}", response_model=list[CardOut])
def get_board_cards(
    board_id: BoardId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(READ)),
):
    """Every card that references the board, in creation order."""
    if boards.get_by_id(db, board_id) is None:
        raise NotFound("Board not found")
    return [CardOut.model_validate(c) for c in cards.list_by(db, "board_id", board_id)]


@router.patch("/{board_id}", response_model=BoardOut)
def update_board(
    board_id: BoardId,
    payload: BoardUpdate,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    board = boards.update_by_id(db, board_id, payload.model_dump(mode="json", exclude_unset=True))
    return BoardOut.model_validate(board)


@router.delete("/{board_id}", status_code=204)
def delete_board(
    board_id: BoardId,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(WRITE)),
):
    boards.delete_by_id(db, board_id)
    return Response(status_code=204)
