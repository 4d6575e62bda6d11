import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from schedule_bsuir.db.models import Group
from schedule_bsuir.dto.models import GroupIn, GroupOut
from schedule_bsuir.services.errors import DuplicateEntity, EntityNotFound

logger = logging.getLogger(__name__)


def get_group(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise EntityNotFound(f"Group not found with id: {group_id}")
    return group


def get_group_by_number(db: Session, group_number: str) -> Group:
    group = db.scalar(select(Group).where(Group.group_number == group_number))
    if group is None:
        raise EntityNotFound(f"Group not found with number: {group_number}")
    return group


def _ensure_number_free(db: Session, group_number: str, own_id: Optional[int] = None):
    existing = db.scalar(select(Group).where(Group.group_number == group_number))
    if existing is not None and existing.id != own_id:
        raise DuplicateEntity(f"Group with number {group_number} already exists")


def find_all(db: Session) -> List[GroupOut]:
    groups = db.scalars(select(Group).order_by(Group.id)).all()
    return [GroupOut.model_validate(g) for g in groups]


def find_by_id(db: Session, group_id: int) -> GroupOut:
    return GroupOut.model_validate(get_group(db, group_id))


def find_by_group_number(db: Session, group_number: str) -> GroupOut:
    return GroupOut.model_validate(get_group_by_number(db, group_number))


def create(db: Session, data: GroupIn) -> GroupOut:
    _ensure_number_free(db, data.group_number)
    group = Group(group_number=data.group_number)
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info(f"Создана группа {group.group_number} (id={group.id})")
    return GroupOut.model_validate(group)


def update(db: Session, group_id: int, data: GroupIn) -> GroupOut:
    group = get_group(db, group_id)
    _ensure_number_free(db, data.group_number, own_id=group.id)
    group.group_number = data.group_number
    db.commit()
    db.refresh(group)
    return GroupOut.model_validate(group)


def delete(db: Session, group_id: int) -> None:
    group = get_group(db, group_id)
    db.delete(group)
    db.commit()
    logger.info(f"Удалена группа id={group_id}")
