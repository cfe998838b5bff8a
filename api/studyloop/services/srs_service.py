"""
SRS (Spaced Repetition System) service for per-user card progress.

This service creates, resets and advances CardProgress records. Due dates are
always computed by the review projector, the same one the scheduler uses to
preview future days, so previews match what answering actually produces.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from studyloop.core.config import settings
from studyloop.core.database import transaction
from studyloop.core.exceptions import NotFoundError, ValidationError
from studyloop.models import CardProgress
from studyloop.services.projector_service import MIN_LEVEL, Projector, clamp_level, get_projector

logger = logging.getLogger(__name__)


def get_progress(session: Session, card_id: int, user_id: int) -> Optional[CardProgress]:
    """Return the user's progress record on a card, if any."""
    return session.exec(
        select(CardProgress).where(
            CardProgress.card_id == card_id,
            CardProgress.user_id == user_id
        )
    ).first()


def ensure_progress(
    session: Session,
    card_id: int,
    user_id: int,
    now: Optional[datetime] = None
) -> CardProgress:
    """
    Create a progress record for (card, user) unless one already exists.

    New records start at level 1, due immediately, with no answer-time estimate.
    Calling this again for the same pair returns the existing record untouched.

    Args:
        session: Database session
        card_id: Card ID
        user_id: User ID
        now: Creation moment (defaults to utcnow)

    Returns:
        The existing or newly created CardProgress
    """
    progress = get_progress(session, card_id, user_id)
    if progress:
        return progress

    progress = CardProgress(
        card_id=card_id,
        user_id=user_id,
        level=MIN_LEVEL,
        due_at=now or datetime.utcnow(),
        estimated_answer_seconds=0.0
    )
    session.add(progress)
    session.flush()
    return progress


def reset_progress(
    progress: CardProgress,
    projector: Optional[Projector] = None,
    now: Optional[datetime] = None
) -> CardProgress:
    """Move a progress record back to level 1, due one level-1 interval from now."""
    projector = projector or get_projector()
    now = now or datetime.utcnow()

    progress.level = MIN_LEVEL
    progress.due_at = projector.project(now, MIN_LEVEL)
    return progress


def update_answer_estimate(current: float, answer_seconds: float, smoothing: float) -> float:
    """
    Blend a new answer duration into the running estimate.

    The first answer (current == 0) is taken as is; later answers are mixed in
    as an exponential moving average weighted by `smoothing`.
    """
    if current <= 0:
        return answer_seconds
    return current + smoothing * (answer_seconds - current)


def advance_on_answer(
    session: Session,
    user_id: int,
    card_id: int,
    correct: bool,
    answer_seconds: Optional[float] = None,
    answered_at: Optional[datetime] = None,
    projector: Optional[Projector] = None
) -> CardProgress:
    """
    Update a progress record after the user answers a card.

    Policy:
    - Correct: level goes up by one, up to settings.max_level. The next due
      date is projected from the current due date when the answer comes on or
      before the due day, and from the answer time when it comes later.
    - Incorrect: level drops to 1 and the card is due one level-1 interval
      after the answer.
    - The answer-time estimate is updated when `answer_seconds` is given.

    Args:
        session: Database session
        user_id: User who answered
        card_id: Card answered
        correct: Whether the answer was correct
        answer_seconds: Time spent answering (optional, must be >= 0)
        answered_at: Moment of the answer (defaults to utcnow)
        projector: Projector to use (defaults to the configured one)

    Returns:
        The updated CardProgress

    Raises:
        ValidationError: If answer_seconds is negative
        NotFoundError: If the user has no progress record on the card
    """
    if answer_seconds is not None and answer_seconds < 0:
        raise ValidationError("answer_seconds must be >= 0")

    projector = projector or get_projector()
    answered_at = answered_at or datetime.utcnow()

    progress = get_progress(session, card_id, user_id)
    if not progress:
        raise NotFoundError(f"No progress for user {user_id} on card {card_id}")

    with transaction(session):
        previous_level = progress.level
        if correct:
            base = progress.due_at if answered_at.date() <= progress.due_at.date() else answered_at
            progress.level = clamp_level(previous_level + 1)
            progress.due_at = projector.project(base, progress.level)
        else:
            progress.level = MIN_LEVEL
            progress.due_at = projector.project(answered_at, MIN_LEVEL)

        if answer_seconds is not None:
            progress.estimated_answer_seconds = update_answer_estimate(
                progress.estimated_answer_seconds,
                answer_seconds,
                settings.answer_time_smoothing
            )

        progress.last_review_time = answered_at
        session.add(progress)

    session.refresh(progress)
    logger.info(
        f"Answer by user {user_id} on card {card_id}: correct={correct}, "
        f"level {previous_level} -> {progress.level}, due_at={progress.due_at}"
    )
    return progress
