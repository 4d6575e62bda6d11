from datetime import date
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DateValue = Union[date, str]


class LessonRecord(BaseModel):
    """
    Одно занятие из ответа внешнего API.
    Даты хранятся как пришли ("10.03.2025" или date), разбор откладывается
    до проверки применимости, чтобы битая дата не роняла весь день.
    """

    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(validation_alias=AliasChoices("subjectFullName", "subject"))
    lesson_type: str = Field(alias="lessonTypeAbbrev")
    start_time: str = Field(alias="startLessonTime")
    end_time: str = Field(alias="endLessonTime")
    auditoriums: List[str] = Field(default_factory=list, alias="auditories")
    single_date: Optional[DateValue] = Field(None, alias="dateLesson")
    date_range_start: Optional[DateValue] = Field(None, alias="startLessonDate")
    date_range_end: Optional[DateValue] = Field(None, alias="endLessonDate")
    week_numbers: List[int] = Field(default_factory=list, alias="weekNumber")

    @field_validator("auditoriums", "week_numbers", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("single_date", "date_range_start", "date_range_end", mode="before")
    @classmethod
    def _raw_date(cls, value):
        if value is None or isinstance(value, date):
            return value
        if isinstance(value, str):
            return value if value.strip() else None
        # не строка (например, 12032025): оставляем как литерал, разбор решит matcher
        return str(value)

    @property
    def auditorium(self) -> str:
        # первая аудитория считается основной
        return self.auditoriums[0] if self.auditoriums else ""

    @property
    def time_range(self) -> str:
        return f"{self.start_time}-{self.end_time}"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class ScheduleItem(CamelModel):
    subject: str
    lesson_type: str
    time: str
    auditorium: str = ""
    group_number: Optional[str] = None
    group_id: Optional[int] = None


class GroupSchedule(CamelModel):
    group_number: str
    date: date
    group_id: Optional[int] = None
    schedules: List[ScheduleItem] = Field(default_factory=list)


class ScheduleIn(CamelModel):
    subject: str
    lesson_type: str
    time: str
    auditorium: str = ""
    group_id: int


class ScheduleOut(ScheduleIn):
    id: int


class GroupIn(CamelModel):
    group_number: str = Field(min_length=1)


class GroupOut(GroupIn):
    id: int
    schedules: List[ScheduleOut] = Field(default_factory=list)
