from datetime import datetime as dt_datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class LogEntry(Base):
    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    timestamp: Mapped[dt_datetime] = mapped_column(DateTime, server_default=func.now())
    level: Mapped[str] = mapped_column(String)
    message: Mapped[str] = mapped_column(String)


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    group_number: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)

    # занятия удаляются вместе с группой
    schedules: Mapped[List["Schedule"]] = relationship(
        back_populates="group", cascade="all, delete-orphan", order_by="Schedule.id"
    )


class Schedule(Base):
    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    subject: Mapped[str] = mapped_column(String, nullable=False)
    lesson_type: Mapped[str] = mapped_column(String, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)
    auditorium: Mapped[str] = mapped_column(String, nullable=False, default="")
    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"), index=True, nullable=False
    )

    group: Mapped[Group] = relationship(back_populates="schedules")
