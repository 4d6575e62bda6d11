class EntityNotFound(LookupError):
    """Группа или занятие не найдены в локальной базе."""


class UpstreamUnavailable(RuntimeError):
    """Внешний API расписания недоступен или ответил мусором."""


class DuplicateEntity(ValueError):
    """Группа с таким номером уже есть."""
