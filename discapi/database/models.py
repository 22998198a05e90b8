"""Catalog database models: singers, their records, and the records' songs."""

from datetime import time
from typing import Optional

from sqlalchemy import ForeignKey, String, Time
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Singer(Base):
    """Model for singers table.

    Deleting a singer deletes its records (ON DELETE CASCADE).
    """
    __tablename__ = "singers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    records: Mapped[list["Record"]] = relationship(
        "Record", back_populates="singer", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Singer(id={self.id}, name='{self.name}')>"


class Record(Base):
    """Model for records table.

    Deleting a record keeps its songs and clears their record_id.
    """
    __tablename__ = "records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    singer_id: Mapped[int] = mapped_column(
        ForeignKey("singers.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    singer: Mapped["Singer"] = relationship("Singer", back_populates="records")
    songs: Mapped[list["Song"]] = relationship(
        "Song", back_populates="record", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Record(id={self.id}, singer_id={self.singer_id})>"


class Song(Base):
    """Model for songs table."""
    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[time] = mapped_column(Time, nullable=False)
    record_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("records.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    record: Mapped[Optional["Record"]] = relationship("Record", back_populates="songs")

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, record_id={self.record_id})>"
