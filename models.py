from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, TypeDecorator
from sqlalchemy.orm import declarative_base
import json

Base = declarative_base()


class JSONType(TypeDecorator):
    """JSON stored as text, so SQLite round-trips lists and dicts."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)


def _utcnow():
    # naive UTC; SQLite keeps no offset
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ScreeningRun(Base):
    __tablename__ = "screening_runs"
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)
    provider = Column(String, nullable=False)
    model = Column(String, nullable=False)
    resume_ids = Column(JSONType, nullable=False)
    top_candidates = Column(JSONType, nullable=False)
    # Full ScreeningResult in its wire (camelCase) form; resume text is not stored
    result = Column(JSONType, nullable=False)
