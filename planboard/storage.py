from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import get_settings
from .db import Base, Board, Card, Checklist, ToDoList
from .errors import Conflict, NotFound, ValidationError
from .utils import parse_sort_by

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


@dataclass(frozen=True)
class Entity:
    """Describes one stored resource type.

    ``filters`` and ``sortable`` map public (camelCase) field names to model
    attributes. ``scope`` is the attribute within which ``name`` must be unique.
    """

    label: str
    model: Type[Base]
    scope: str
    filters: Dict[str, str]
    sortable: Dict[str, str] = field(default_factory=dict)


@dataclass
class QueryResult(Generic[T]):
    results: List[T]
    page: int
    limit: int
    total_pages: int
    total_results: int


class Repository(Generic[T]):
    """CRUD, pagination and scoped name uniqueness for a single entity."""

    def __init__(self, entity: Entity) -> None:
        self.entity = entity
        self.model = entity.model

    # === Lookups ===
    def get_by_id(self, db: Session, record_id: str) -> Optional[T]:
        return db.get(self.model, record_id)

    def list_by(self, db: Session, attr: str, value: Any) -> List[T]:
        column = getattr(self.model, attr)
        stmt = select(self.model).where(column == value).order_by(self.model.created_at, self.model.id)
        return list(db.scalars(stmt))

    def is_name_taken(
        self,
        db: Session,
        name: str,
        scope_value: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> bool:
        scope = getattr(self.model, self.entity.scope)
        stmt = select(self.model.id).where(self.model.name == name, scope == scope_value)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return db.scalars(stmt.limit(1)).first() is not None

    # === Query ===
    def query(
        self,
        db: Session,
        filter: Mapping[str, Any],
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> QueryResult[T]:
        settings = get_settings()
        limit = min(max(1, limit if limit is not None else settings.default_page_limit), settings.max_page_limit)
        page = max(1, page if page is not None else 1)
        ordering = self._ordering(sort_by)

        conditions = []
        for key, value in filter.items():
            attr = self.entity.filters.get(key)
            if attr is None or value is None:
                continue
            conditions.append(getattr(self.model, attr) == value)

        count_stmt = select(func.count()).select_from(self.model).where(*conditions)
        total = db.scalar(count_stmt) or 0

        offset = (page - 1) * limit
        results: List[T] = []
        # pages past the end are empty; the offset is never handed to the store
        if offset < total:
            stmt = select(self.model).where(*conditions).order_by(*ordering).offset(offset).limit(limit)
            results = list(db.scalars(stmt))
        return QueryResult(
            results=results,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
            total_results=total,
        )

    def _ordering(self, sort_by: Optional[str]) -> list:
        if not sort_by:
            return [self.model.created_at.asc(), self.model.id.asc()]
        try:
            criteria = parse_sort_by(sort_by)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        ordering = []
        for key, descending in criteria:
            attr = self.entity.sortable.get(key)
            if attr is None:
                raise ValidationError(f"cannot sort {self.entity.label} by '{key}'")
            column = getattr(self.model, attr)
            ordering.append(column.desc() if descending else column.asc())
        ordering.append(self.model.id.asc())
        return ordering

    # === Mutations ===
    def create(self, db: Session, body: Mapping[str, Any]) -> T:
        scope_value = body.get(self.entity.scope)
        if self.is_name_taken(db, body["name"], scope_value):
            logger.info("%s name %r already taken in %s", self.entity.label, body["name"], scope_value)
            raise Conflict(f"This {self.entity.label.lower()} already exists")
        record = self.model(**body)
        db.add(record)
        self._commit(db)
        db.refresh(record)
        logger.info("Created %s %s", self.entity.label, record.id)
        return record

    def update_by_id(self, db: Session, record_id: str, partial: Mapping[str, Any]) -> T:
        record = self.get_by_id(db, record_id)
        if record is None:
            raise NotFound(f"{self.entity.label} not found")
        scope = self.entity.scope
        if "name" in partial or scope in partial:
            name = partial.get("name", record.name)
            scope_value = partial.get(scope, getattr(record, scope))
            if self.is_name_taken(db, name, scope_value, exclude_id=record.id):
                raise Conflict(f"A {self.entity.label.lower()} by this name already exists")
        for key, value in partial.items():
            setattr(record, key, value)
        self._commit(db)
        db.refresh(record)
        logger.info("Updated %s %s: %s", self.entity.label, record.id, ", ".join(sorted(partial)))
        return record

    def delete_by_id(self, db: Session, record_id: str) -> T:
        record = self.get_by_id(db, record_id)
        if record is None:
            raise NotFound(f"{self.entity.label} not found")
        db.delete(record)
        db.commit()
        logger.info("Deleted %s %s", self.entity.label, record_id)
        return record

    def _commit(self, db: Session) -> None:
        # the unique constraint catches duplicates that raced past is_name_taken
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning("%s write rejected by the store: %s", self.entity.label, exc.orig)
            raise Conflict(f"This {self.entity.label.lower()} already exists") from exc


_TIMESTAMPS = {"createdAt": "created_at", "updatedAt": "updated_at"}

boards: Repository[Board] = Repository(
    Entity(
        label="Board",
        model=Board,
        scope="owner",
        filters={"owner": "owner", "name": "name"},
        sortable={"name": "name", "owner": "owner", **_TIMESTAMPS},
    )
)

cards: Repository[Card] = Repository(
    Entity(
        label="Card",
        model=Card,
        scope="board_id",
        filters={"boardId": "board_id", "owner": "owner", "name": "name"},
        sortable={"name": "name", "boardId": "board_id", **_TIMESTAMPS},
    )
)

checklists: Repository[Checklist] = Repository(
    Entity(
        label="Checklist",
        model=Checklist,
        scope="card_id",
        filters={"cardId": "card_id", "boardId": "board_id", "owner": "owner", "name": "name"},
        sortable={
            "name": "name",
            "rating": "rating",
            "columnPosition": "column_position",
            "global": "is_global",
            **_TIMESTAMPS,
        },
    )
)

todolists: Repository[ToDoList] = Repository(
    Entity(
        label="ToDoList",
        model=ToDoList,
        scope="card_id",
        filters={"cardId": "card_id", "status": "status", "name": "name"},
        sortable={"name": "name", "status": "status", **_TIMESTAMPS},
    )
)
