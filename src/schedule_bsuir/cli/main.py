import asyncio
import logging
import subprocess
from datetime import date, datetime
from typing import Mapping, Optional

import pytz
import typer

from schedule_bsuir.bsuir_api import client as bsuir_client
from schedule_bsuir.config import get_settings
from schedule_bsuir.database import init_db
from schedule_bsuir.logs.logger_setup import setup_logging
from schedule_bsuir.schedule.resolver import resolve_day
from schedule_bsuir.schedule.weekday import localize

# Инициализация настроек
settings = get_settings()

# Настройка логирования (resolve работает без базы)
setup_logging(with_db=False)
logger = logging.getLogger("cli_logger")

# Typer-приложение
app = typer.Typer()


def _today() -> date:
    return datetime.now(pytz.timezone(settings.TIMEZONE)).date()


async def _fetch(group_number: str) -> dict:
    try:
        return await bsuir_client.fetch_group_schedule(group_number)
    finally:
        await bsuir_client.close()


@app.command("init-db")
def init_db_cmd():
    """
    Создает таблицы в базе данных.
    """
    logger.info("Команда init-db")
    init_db()
    typer.echo("Таблицы созданы.")


@app.command()
def migrate():
    """
    Применяет все доступные миграции Alembic.
    """
    logger.info("Выполнение миграций Alembic")
    subprocess.run(["alembic", "upgrade", "head"], check=True)
    logger.info("Миграции применены.")


@app.command()
def resolve(
        group_number: str,
        target_date: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"]),
):
    """
    Показывает занятия группы на дату прямо из внешнего API (без базы).
    """
    day = target_date.date() if target_date else _today()
    logger.info(f"Команда resolve() для группы {group_number} на {day.isoformat()}")

    payload = asyncio.run(_fetch(group_number))
    schedules = payload.get("schedules") if isinstance(payload, Mapping) else None
    if not isinstance(schedules, Mapping):
        schedules = {}
    lessons = resolve_day(schedules, day, group_number, settings.SEMESTER_START)

    typer.echo(f"{group_number}, {localize(day)} {day.strftime('%d.%m.%Y')}:")
    if not lessons:
        typer.echo("Занятий нет.")
        return
    for lesson in lessons:
        room = f" [{lesson.auditorium}]" if lesson.auditorium else ""
        typer.echo(f" - {lesson.time} {lesson.subject} ({lesson.lesson_type}){room}")


@app.command()
def serve(host: str = "0.0.0.0", port: int = 8000):
    """
    Запускает REST API.
    """
    import uvicorn

    logger.info(f"Запуск API на {host}:{port}")
    uvicorn.run("schedule_bsuir.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
