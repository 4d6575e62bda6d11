import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from schedule_bsuir.bsuir_api import client as bsuir_client
from schedule_bsuir.database import get_db, init_db
from schedule_bsuir.db.models import LogEntry
from schedule_bsuir.dto.models import GroupIn, GroupOut, GroupSchedule, ScheduleIn, ScheduleOut
from schedule_bsuir.logs.logger_setup import setup_logging
from schedule_bsuir.services import group_service, schedule_service
from schedule_bsuir.services.errors import DuplicateEntity, EntityNotFound, UpstreamUnavailable
from schedule_bsuir.services.schedule_service import ScheduleFetcher

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    await bsuir_client.close()


app = FastAPI(title="BSUIR group schedule", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter()
groups_router = APIRouter(prefix="/groups", tags=["groups"])
schedules_router = APIRouter(prefix="/schedules", tags=["schedules"])


def get_schedule_fetcher() -> ScheduleFetcher:
    """Источник сырых данных расписания (в тестах подменяется)."""
    return bsuir_client.fetch_group_schedule


# Ошибки сервисов -> HTTP
@app.exception_handler(EntityNotFound)
async def _not_found(request: Request, exc: EntityNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DuplicateEntity)
async def _duplicate(request: Request, exc: DuplicateEntity):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(UpstreamUnavailable)
async def _upstream(request: Request, exc: UpstreamUnavailable):
    logger.error(f"{request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": "Schedule API is unavailable"})


@app.get("/healthz", include_in_schema=False)
def healthcheck():
    return {"status": "ok"}


@api_router.get("/health")
async def health():
    return {"status": "ok"}


# Расписание группы на дату из внешнего API
@api_router.get("/schedule", response_model=GroupSchedule)
async def get_schedule(
        group_number: str = Query(..., alias="groupNumber"),
        target_date: date = Query(..., alias="date"),
        db: Session = Depends(get_db),
        fetch: ScheduleFetcher = Depends(get_schedule_fetcher),
):
    return await schedule_service.get_schedule(db, group_number, target_date, fetch)


# Группы
@groups_router.get("", response_model=List[GroupOut])
def list_groups(db: Session = Depends(get_db)):
    return group_service.find_all(db)


@groups_router.get("/number/{group_number}", response_model=GroupOut)
def get_group_by_number(group_number: str, db: Session = Depends(get_db)):
    return group_service.find_by_group_number(db, group_number)


@groups_router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: int, db: Session = Depends(get_db)):
    return group_service.find_by_id(db, group_id)


@groups_router.post("", response_model=GroupOut, status_code=201)
def create_group(data: GroupIn, db: Session = Depends(get_db)):
    return group_service.create(db, data)


@groups_router.put("/{group_id}", response_model=GroupOut)
def update_group(group_id: int, data: GroupIn, db: Session = Depends(get_db)):
    return group_service.update(db, group_id, data)


@groups_router.delete("/{group_id}", status_code=204)
def delete_group(group_id: int, db: Session = Depends(get_db)):
    group_service.delete(db, group_id)
    return Response(status_code=204)


# Сохраненные занятия
@schedules_router.get("", response_model=List[ScheduleOut])
def list_schedules(db: Session = Depends(get_db)):
    return schedule_service.find_all(db)


@schedules_router.get("/group/{group_id}", response_model=List[ScheduleOut])
def list_group_schedules(group_id: int, db: Session = Depends(get_db)):
    return schedule_service.find_by_group_id(db, group_id)


@schedules_router.get("/{schedule_id}", response_model=ScheduleOut)
def get_saved_schedule(schedule_id: int, db: Session = Depends(get_db)):
    return schedule_service.find_by_id(db, schedule_id)


@schedules_router.post("", response_model=ScheduleOut, status_code=201)
def create_schedule(data: ScheduleIn, db: Session = Depends(get_db)):
    return schedule_service.create(db, data)


@schedules_router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(schedule_id: int, data: ScheduleIn, db: Session = Depends(get_db)):
    return schedule_service.update(db, schedule_id, data)


@schedules_router.delete("/{schedule_id}", status_code=204)
def delete_schedule(schedule_id: int, db: Session = Depends(get_db)):
    schedule_service.delete(db, schedule_id)
    return Response(status_code=204)


# Диагностика из БД (битые даты, пропущенные занятия, ошибки внешнего API)
@api_router.get("/logs/sql")
def get_sql_logs(after_id: int = 0, db: Session = Depends(get_db)):
    entries = db.scalars(
        select(LogEntry).where(LogEntry.id > after_id).order_by(LogEntry.id).limit(100)
    ).all()
    return [
        {"id": e.id, "ts": e.timestamp.isoformat(), "level": e.level, "msg": e.message}
        for e in entries
    ]


api_router.include_router(groups_router)
api_router.include_router(schedules_router)
app.include_router(api_router, prefix="/api")
