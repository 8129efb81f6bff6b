from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Literal, Optional, Type, TypeVar

from pydantic import Field, NonNegativeInt, model_validator

from .schemas import ApiModel, Name, ObjectId, OutModel, Page, Url
from .storage import QueryResult

Rating = Literal["very poor", "poor", "average", "good", "very good"]
Status = Literal["Not started", "In progress", "Completed", "Cancelled"]


class PatchModel(ApiModel):
    """Partial update body: at least one field, and no nulls for required columns."""

    non_nullable: ClassVar[frozenset[str]] = frozenset({"name"})

    @model_validator(mode="after")
    def check_fields(self):
        supplied = self.model_fields_set
        if not supplied:
            raise ValueError("at least one field must be supplied")
        fields = type(self).model_fields
        for name in sorted(supplied & self.non_nullable):
            if getattr(self, name) is None:
                raise ValueError(f"'{fields[name].alias or name}' may not be null")
        return self


# === Board ===


class BoardCreate(ApiModel):
    name: Name
    owner: Optional[ObjectId] = None


class BoardUpdate(PatchModel):
    name: Optional[Name] = None
    owner: Optional[ObjectId] = None


class BoardOut(OutModel):
    id: str
    name: str
    owner: Optional[str]
    created_at: datetime
    updated_at: datetime


# === Card ===


class CardCreate(ApiModel):
    name: Name
    owner: Optional[ObjectId] = None
    board_id: ObjectId
    note: Optional[str] = Field(default=None, max_length=8000)
    links: list[Url] = Field(default_factory=list)


class CardUpdate(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "board_id", "links"})

    name: Optional[Name] = None
    owner: Optional[ObjectId] = None
    board_id: Optional[ObjectId] = None
    note: Optional[str] = Field(default=None, max_length=8000)
    links: Optional[list[Url]] = None


class CardOut(OutModel):
    id: str
    name: str
    owner: Optional[str]
    board_id: str
    note: Optional[str]
    links: list[str]
    created_at: datetime
    updated_at: datetime


# === Checklist ===


class ChecklistCreate(ApiModel):
    name: Name
    owner: ObjectId
    board_id: ObjectId
    card_id: ObjectId
    is_global: bool = Field(default=False, alias="global")
    rating: Optional[Rating] = None
    column_position: Optional[NonNegativeInt] = None


class ChecklistUpdate(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "owner", "board_id", "card_id", "is_global"})

    name: Optional[Name] = None
    owner: Optional[ObjectId] = None
    board_id: Optional[ObjectId] = None
    card_id: Optional[ObjectId] = None
    is_global: Optional[bool] = Field(default=None, alias="global")
    rating: Optional[Rating] = None
    column_position: Optional[NonNegativeInt] = None


class ChecklistOut(OutModel):
    id: str
    name: str
    owner: str
    board_id: str
    card_id: str
    is_global: bool = Field(alias="global")
    rating: Optional[str]
    column_position: Optional[int]
    created_at: datetime
    updated_at: datetime


# === ToDoList ===


class ToDoListCreate(ApiModel):
    name: Name
    card_id: ObjectId
    free_text: Optional[str] = None
    status: Status = "Not started"


class ToDoListUpdate(PatchModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "card_id", "status"})

    name: Optional[Name] = None
    card_id: Optional[ObjectId] = None
    free_text: Optional[str] = None
    status: Optional[Status] = None


class ToDoListOut(OutModel):
    id: str
    name: str
    card_id: str
    free_text: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime


# === Composite views ===


class CardView(OutModel):
    card: CardOut
    checklists: list[ChecklistOut]
    to_do_lists: list[ToDoListOut]


O = TypeVar("O", bound=OutModel)


def to_page(result: QueryResult, out: Type[O]) -> Page[O]:
    return Page[out](
        results=[out.model_validate(r) for r in result.results],
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        total_results=result.total_results,
    )
