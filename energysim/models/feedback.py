import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, Uuid

from energysim.models.base import Base
from energysim.models.simulation import _utcnow


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, nullable=False, default=_utcnow)
    user_id = Column(String, nullable=True)
    user_email = Column(String, nullable=True)
    rating = Column(Integer, nullable=False)
    message = Column(Text, nullable=True)
    page = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )
