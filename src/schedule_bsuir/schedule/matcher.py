import logging
from datetime import date, datetime
from typing import Optional

from schedule_bsuir.dto.models import DateValue, LessonRecord

logger = logging.getLogger(__name__)

# Формат дат во внешнем API: 09.02.2025
API_DATE_FORMAT = "%d.%m.%Y"


class MalformedDateLiteral(ValueError):
    """Дату занятия не удалось разобрать."""

    def __init__(self, literal: str):
        super().__init__(f"Некорректная дата: {literal!r}")
        self.literal = literal


def parse_lesson_date(value: Optional[DateValue]) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    literal = value.strip()
    for fmt in (API_DATE_FORMAT, "%Y-%m-%d"):
        try:
            return datetime.strptime(literal, fmt).date()
        except ValueError:
            continue
    raise MalformedDateLiteral(value)


def semester_week(target_date: date, semester_start: date) -> int:
    """Номер учебной недели (с 1), неделя = 7 дней от начала семестра."""
    return (target_date - semester_start).days // 7 + 1


def applies(lesson: LessonRecord, target_date: date, semester_start: date) -> bool:
    """
    Проходит ли занятие в указанную дату.

    Порядок проверок:
      1. номера недель — если текущей недели нет в списке, занятия нет;
      2. точная дата занятия;
      3. период действия (границы включительно);
      4. ограничений нет — занятие есть.
    Битая дата в любом поле не считается ошибкой: занятие показывается,
    в лог пишется предупреждение.
    """
    try:
        if lesson.week_numbers:
            if semester_week(target_date, semester_start) not in lesson.week_numbers:
                return False

        single = parse_lesson_date(lesson.single_date)
        if single is not None:
            return single == target_date

        # период учитывается только при обеих границах
        if lesson.date_range_start is not None and lesson.date_range_end is not None:
            start = parse_lesson_date(lesson.date_range_start)
            end = parse_lesson_date(lesson.date_range_end)
            return start <= target_date <= end

        return True
    except MalformedDateLiteral as e:
        logger.warning(
            f"Занятие '{lesson.subject}' показано на {target_date.isoformat()} без проверки дат: {e}"
        )
        return True
