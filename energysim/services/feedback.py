import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from energysim.models.feedback import Feedback
from energysim.services.auth import AuthUser
from energysim.services.history import StoreResult

logger = logging.getLogger(__name__)

RATING_LABELS = {1: "Poor", 2: "Fair", 3: "Good", 4: "Very Good", 5: "Excellent"}


def submit_feedback(db: DbSession, user: AuthUser | None, rating: int,
                    message: str | None = None, page: str | None = None) -> StoreResult:
    if not rating:
        return StoreResult(error="Please select a rating")
    if rating not in RATING_LABELS:
        return StoreResult(error="Rating must be between 1 and 5")

    entry = Feedback(
        user_id=user.id if user else None,
        user_email=user.email if user else None,
        rating=rating,
        message=(message or "").strip() or None,
        page=page,
    )
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving feedback")
        return StoreResult(error="Failed to submit feedback")
    return StoreResult(data=entry)
