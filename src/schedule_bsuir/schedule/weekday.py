from datetime import date
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class Weekday(IntEnum):
    """День недели по ISO: понедельник = 1 ... воскресенье = 7."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


# Ключи дней во внешнем API должны совпадать буква в букву
WEEKDAY_NAMES: Mapping[Weekday, str] = MappingProxyType({
    Weekday.MONDAY: "Понедельник",
    Weekday.TUESDAY: "Вторник",
    Weekday.WEDNESDAY: "Среда",
    Weekday.THURSDAY: "Четверг",
    Weekday.FRIDAY: "Пятница",
    Weekday.SATURDAY: "Суббота",
    Weekday.SUNDAY: "Воскресенье",
})


def localize(day: date) -> str:
    """Название дня недели для даты (ключ блока расписания)."""
    return WEEKDAY_NAMES[Weekday(day.isoweekday())]
