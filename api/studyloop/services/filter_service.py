"""
Filter service: typed query helpers over progress records and configs.
"""
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import and_, false
from sqlmodel import Session, select

from studyloop.models import CardProgress, TopicConfig


# ============================================================================
# Criteria
# ============================================================================

def due_before(moment: datetime):
    """Progress records due strictly before `moment`."""
    return CardProgress.due_at < moment


def due_on_or_before(moment: datetime):
    """Progress records due at or before `moment`."""
    return CardProgress.due_at <= moment


def due_within(start: datetime, end: datetime):
    """Progress records due in the half-open interval [start, end)."""
    return and_(CardProgress.due_at >= start, CardProgress.due_at < end)


def id_in(column, ids: Iterable[int]):
    """Set-membership criterion; an empty set matches nothing."""
    id_list = list(ids)
    if not id_list:
        return false()
    return column.in_(id_list)  # type: ignore[attr-defined]


# ============================================================================
# Queries
# ============================================================================

def select_progress(session: Session, user_id: int, *criteria) -> List[CardProgress]:
    """Return a user's progress records matching all criteria, ordered by card id."""
    query = (
        select(CardProgress)
        .where(CardProgress.user_id == user_id, *criteria)
        .order_by(CardProgress.card_id)  # type: ignore
    )
    return list(session.exec(query).all())


def select_eligible_configs(session: Session, user_id: int) -> List[TopicConfig]:
    """Return configs of topics the user is actively reviewing and has not archived."""
    query = (
        select(TopicConfig)
        .where(
            TopicConfig.user_id == user_id,
            TopicConfig.reviewing == True,  # noqa: E712
            TopicConfig.archived == False,  # noqa: E712
        )
        .order_by(TopicConfig.topic_id)  # type: ignore
    )
    return list(session.exec(query).all())
