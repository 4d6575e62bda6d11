import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from schedule_bsuir.dto.models import LessonRecord, ScheduleItem
from schedule_bsuir.schedule.matcher import applies
from schedule_bsuir.schedule.weekday import localize

logger = logging.getLogger(__name__)


def parse_lessons(raw_lessons: Sequence[Mapping[str, Any]]) -> List[LessonRecord]:
    """Разбирает занятия дня; записи без предмета, типа или времени пропускаются."""
    lessons: List[LessonRecord] = []
    for index, raw in enumerate(raw_lessons):
        if not isinstance(raw, Mapping):
            logger.warning(f"Пропущено занятие #{index}: ожидался объект, получено {type(raw).__name__}")
            continue
        try:
            lessons.append(LessonRecord.model_validate(raw))
        except ValidationError as e:
            fields = ", ".join(".".join(map(str, err["loc"])) for err in e.errors())
            logger.warning(f"Пропущено занятие #{index}: некорректные поля ({fields})")
    return lessons


def resolve_day(
    schedules: Mapping[str, Sequence[Mapping[str, Any]]],
    target_date: date,
    group_number: str,
    semester_start: date,
    group_id: Optional[int] = None,
) -> List[ScheduleItem]:
    day_name = localize(target_date)
    raw_lessons = schedules.get(day_name) if isinstance(schedules, Mapping) else None
    # блок дня должен быть списком, остальное считаем отсутствием данных
    if not raw_lessons or not isinstance(raw_lessons, list):
        logger.info(f"Группа {group_number}: нет занятий в блоке '{day_name}' ({target_date.isoformat()})")
        return []

    items: List[ScheduleItem] = []
    for lesson in parse_lessons(raw_lessons):
        if not applies(lesson, target_date, semester_start):
            logger.debug(f"Занятие пропущено по дате/неделе: {lesson.subject}")
            continue
        items.append(
            ScheduleItem(
                subject=lesson.subject,
                lesson_type=lesson.lesson_type,
                time=lesson.time_range,
                auditorium=lesson.auditorium,
                group_number=group_number,
                group_id=group_id,
            )
        )

    logger.info(f"Группа {group_number}: найдено занятий {len(items)} на {target_date.isoformat()}")
    return items
