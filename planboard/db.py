from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .config import get_settings
from .utils import new_object_id


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


DATABASE_URL = get_settings().database_url


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


# References between tables are plain indexed ids: deleting a parent leaves its children.


class Board(TimestampMixin, Base):
    __tablename__ = "boards"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(200))
    owner: Mapped[str | None] = mapped_column(String(24), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("owner", "name", name="uq_boards_owner_name"),
    )


class Card(TimestampMixin, Base):
    __tablename__ = "cards"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(200))
    owner: Mapped[str | None] = mapped_column(String(24), nullable=True)
    board_id: Mapped[str] = mapped_column(String(24), index=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    links: Mapped[list[str]] = mapped_column(JSON, default=list)

    __table_args__ = (
        UniqueConstraint("board_id", "name", name="uq_cards_board_name"),
    )


class Checklist(TimestampMixin, Base):
    __tablename__ = "checklists"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(200))
    owner: Mapped[str] = mapped_column(String(24))
    board_id: Mapped[str] = mapped_column(String(24), index=True)
    card_id: Mapped[str] = mapped_column(String(24), index=True)
    is_global: Mapped[bool] = mapped_column("global", Boolean, default=False)
    rating: Mapped[str | None] = mapped_column(String(16), nullable=True)  # very poor..very good
    column_position: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("card_id", "name", name="uq_checklists_card_name"),
    )


class ToDoList(TimestampMixin, Base):
    __tablename__ = "todolists"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(200))
    card_id: Mapped[str] = mapped_column(String(24), index=True)
    free_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="Not started")

    __table_args__ = (
        UniqueConstraint("card_id", "name", name="uq_todolists_card_name"),
    )


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
