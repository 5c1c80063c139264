"""Database table for persisted sessions."""

from typing import Optional

from sqlmodel import Field, SQLModel


class SessionRecord(SQLModel, table=True):
    """One row of the work_sessions table.

    Timestamps are stored as text in the canonical YYYY-MM-DD HH:MM:SS format.
    `difference` holds the duration in whole seconds.
    """

    __tablename__ = "work_sessions"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    external_id: str = Field(unique=True, nullable=False)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    start_time: str = Field(nullable=False, index=True)
    end_time: Optional[str] = Field(default=None, index=True)
    difference: int = 0
    hourly_rate: float = 0.0
    earnings: float = 0.0
    created_by: str = Field(nullable=False)
