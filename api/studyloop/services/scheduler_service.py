"""
Study scheduler: answers "what is due on a given day" for a user.

Two branches, never mixed within one query:
- catch-up (day <= today): everything due up to the end of that day.
- future preview (day > today): cards due on that day, plus cards due earlier
  whose simulated chain of correct answers lands on that day.
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Set

from sqlmodel import Session, select

from studyloop.core.config import settings
from studyloop.core.exceptions import ProjectorInvariantError
from studyloop.models import Card, CardProgress, Topic
from studyloop.services.filter_service import (
    due_before,
    due_on_or_before,
    due_within,
    id_in,
    select_eligible_configs,
    select_progress,
)
from studyloop.services.projector_service import Projector, get_projector
from studyloop.utils.date_utils import same_calendar_day, start_of_day, start_of_next_day

logger = logging.getLogger(__name__)


def lands_on_day(
    progress: CardProgress,
    day: date,
    projector: Projector,
    max_steps: Optional[int] = None
) -> bool:
    """
    Simulate consecutive correct answers and check whether one lands on `day`.

    Starting from the record's due date, the next due date is projected with
    level+1, then level+2, and so on, until it is no longer before the start of
    `day`. The card is due on `day` only if that first date falls on `day`.

    Raises:
        ProjectorInvariantError: If a projection does not move the date forward
            or the simulation exceeds `max_steps`
    """
    if max_steps is None:
        max_steps = settings.max_projection_steps
    target = start_of_day(day)

    n = 1
    projected = projector.project(progress.due_at, progress.level + n)
    previous = progress.due_at
    while projected < target:
        if projected <= previous:
            raise ProjectorInvariantError(
                f"Projector did not advance card {progress.card_id} past {previous} "
                f"at level {progress.level + n}"
            )
        if n >= max_steps:
            raise ProjectorInvariantError(
                f"Projection for card {progress.card_id} exceeded {max_steps} steps"
            )
        previous = projected
        n += 1
        projected = projector.project(projected, progress.level + n)

    if projected <= previous:
        raise ProjectorInvariantError(
            f"Projector did not advance card {progress.card_id} past {previous} "
            f"at level {progress.level + n}"
        )

    return same_calendar_day(projected, day)


def candidate_progress(
    session: Session,
    user_id: int,
    day: date,
    today: date,
    projector: Projector
) -> Dict[int, CardProgress]:
    """Return the user's progress records due on `day`, keyed by card id."""
    if day <= today:
        records = select_progress(session, user_id, due_before(start_of_next_day(day)))
        return {p.card_id: p for p in records}

    due = {
        p.card_id: p
        for p in select_progress(
            session, user_id, due_within(start_of_day(day), start_of_next_day(day))
        )
    }
    for progress in select_progress(session, user_id, due_before(start_of_day(day))):
        if lands_on_day(progress, day, projector):
            due[progress.card_id] = progress
    return due


def topics_due(
    session: Session,
    user_id: int,
    day: date,
    today: Optional[date] = None,
    projector: Optional[Projector] = None
) -> List[dict]:
    """
    Get the topics a user has to study on `day`.

    Args:
        session: Database session
        user_id: User ID
        day: Day to compute the workload for
        today: Reference "today" (defaults to the current UTC date)
        projector: Projector for the future preview (defaults to the configured one)

    Returns:
        List of {'topic': Topic, 'cards_count': int, 'approx_time': int},
        ordered by topic id. Topics with no due cards are omitted.
    """
    today = today or datetime.utcnow().date()
    projector = projector or get_projector()

    configs = select_eligible_configs(session, user_id)
    if not configs:
        return []

    due = candidate_progress(session, user_id, day, today, projector)
    if not due:
        return []

    topic_ids = [config.topic_id for config in configs]
    topics = session.exec(
        select(Topic).where(id_in(Topic.id, topic_ids)).order_by(Topic.id)  # type: ignore
    ).all()

    cards = session.exec(
        select(Card).where(id_in(Card.topic_id, topic_ids), id_in(Card.id, due.keys()))
    ).all()
    cards_by_topic: Dict[int, List[Card]] = {}
    for card in cards:
        cards_by_topic.setdefault(card.topic_id, []).append(card)

    study_topics = []
    for topic in topics:
        topic_cards = cards_by_topic.get(topic.id, [])
        if not topic_cards:
            continue

        approx_time = sum(due[card.id].estimated_answer_seconds for card in topic_cards)
        study_topics.append({
            'topic': topic,
            'cards_count': len(topic_cards),
            'approx_time': int(approx_time)
        })

    logger.info(
        f"topics_due: user_id={user_id}, day={day}, today={today}, "
        f"{len(due)} due card(s) across {len(study_topics)} topic(s)"
    )
    return study_topics


def cards_due_now(
    session: Session,
    user_id: int,
    now: Optional[datetime] = None,
    topic_id: Optional[int] = None
) -> List[Card]:
    """
    Get every card the user has due at or before `now`.

    Only topics the user is reviewing and has not archived contribute, so the
    result is always within what topics_due reports for today.

    Args:
        session: Database session
        user_id: User ID
        now: Reference moment (defaults to utcnow)
        topic_id: Optional topic to restrict the result to

    Returns:
        Cards ordered by id
    """
    now = now or datetime.utcnow()
    topic_ids = [config.topic_id for config in select_eligible_configs(session, user_id)]
    card_ids: Set[int] = {
        p.card_id for p in select_progress(session, user_id, due_on_or_before(now))
    }

    query = select(Card).where(id_in(Card.id, card_ids), id_in(Card.topic_id, topic_ids))
    if topic_id is not None:
        query = query.where(Card.topic_id == topic_id)
    return list(session.exec(query.order_by(Card.id)).all())  # type: ignore
