import logging

from schedule_bsuir.database import SessionLocal
from schedule_bsuir.db.models import LogEntry


class DBLogHandler(logging.Handler):
    def emit(self, record):
        session = SessionLocal()
        try:
            entry = LogEntry(level=record.levelname, message=self.format(record))
            session.add(entry)
            session.commit()
        except Exception:
            session.rollback()
            self.handleError(record)
        finally:
            session.close()
