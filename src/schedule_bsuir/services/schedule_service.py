import logging
from datetime import date
from typing import Any, Awaitable, Callable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from schedule_bsuir.config import get_settings
from schedule_bsuir.db.models import Schedule
from schedule_bsuir.dto.models import GroupSchedule, ScheduleIn, ScheduleOut
from schedule_bsuir.schedule.resolver import resolve_day
from schedule_bsuir.services.errors import EntityNotFound
from schedule_bsuir.services.group_service import get_group, get_group_by_number

logger = logging.getLogger(__name__)

ScheduleFetcher = Callable[[str], Awaitable[Mapping[str, Any]]]


def _get_schedule(db: Session, schedule_id: int) -> Schedule:
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        raise EntityNotFound(f"Schedule not found with id: {schedule_id}")
    return schedule


def find_all(db: Session) -> List[ScheduleOut]:
    rows = db.scalars(select(Schedule).order_by(Schedule.id)).all()
    return [ScheduleOut.model_validate(s) for s in rows]


def find_by_id(db: Session, schedule_id: int) -> ScheduleOut:
    return ScheduleOut.model_validate(_get_schedule(db, schedule_id))


def find_by_group_id(db: Session, group_id: int) -> List[ScheduleOut]:
    rows = db.scalars(
        select(Schedule).where(Schedule.group_id == group_id).order_by(Schedule.id)
    ).all()
    return [ScheduleOut.model_validate(s) for s in rows]


def create(db: Session, data: ScheduleIn) -> ScheduleOut:
    group = get_group(db, data.group_id)
    schedule = Schedule(
        subject=data.subject,
        lesson_type=data.lesson_type,
        time=data.time,
        auditorium=data.auditorium,
        group=group,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return ScheduleOut.model_validate(schedule)


def update(db: Session, schedule_id: int, data: ScheduleIn) -> ScheduleOut:
    schedule = _get_schedule(db, schedule_id)
    group = get_group(db, data.group_id)
    schedule.subject = data.subject
    schedule.lesson_type = data.lesson_type
    schedule.time = data.time
    schedule.auditorium = data.auditorium
    schedule.group = group
    db.commit()
    db.refresh(schedule)
    return ScheduleOut.model_validate(schedule)


def delete(db: Session, schedule_id: int) -> None:
    schedule = _get_schedule(db, schedule_id)
    db.delete(schedule)
    db.commit()


async def get_schedule(
    db: Session,
    group_number: str,
    target_date: date,
    fetch: ScheduleFetcher,
    semester_start: Optional[date] = None,
) -> GroupSchedule:
    """
    Расписание группы на дату: группа должна быть в локальной базе,
    занятия берутся из внешнего API и фильтруются по дате.
    """
    group = get_group_by_number(db, group_number)
    response = GroupSchedule(group_number=group_number, date=target_date, group_id=group.id)

    payload = await fetch(group_number)
    schedules = payload.get("schedules") if isinstance(payload, Mapping) else None
    if not schedules or not isinstance(schedules, Mapping):
        logger.info(f"Во внешнем API нет расписания для группы {group_number}")
        return response

    response.schedules = resolve_day(
        schedules,
        target_date,
        group_number,
        semester_start or get_settings().SEMESTER_START,
        group_id=group.id,
    )
    return response
