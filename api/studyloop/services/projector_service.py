"""
Review projector: decides the next due date from a due date and a level.

A projector is any object with a `project(due_at, level)` method that is
deterministic, non-decreasing in `level` for a fixed `due_at`, and returns a
moment strictly later than `due_at`. The scheduler's forward simulation and
the answer handler in srs_service share the same projector instance.

Levels are clamped to [MIN_LEVEL, settings.max_level], so intervals stop
growing at the top level instead of running past the datetime range.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Protocol

from studyloop.core.config import settings
from studyloop.core.exceptions import ValidationError
from studyloop.models.enums import ProjectorAlgorithm

logger = logging.getLogger(__name__)

MIN_LEVEL = 1


class Projector(Protocol):
    """Interface every interval-growth strategy implements."""

    def project(self, due_at: datetime, level: int) -> datetime:
        ...


def clamp_level(level: int, max_level: Optional[int] = None) -> int:
    """Clamp a progress level to [MIN_LEVEL, max_level] (max_level defaults to settings)."""
    if max_level is None:
        max_level = settings.max_level
    return max(MIN_LEVEL, min(max_level, level))


def calculate_fibonacci_interval(
    level: int,
    interval_start_days: int,
    max_level: Optional[int] = None
) -> int:
    """
    Calculate review interval in days using the Fibonacci sequence.

    Level 1 = start, Level 2 = start, Level 3 = 2*start, Level 4 = 3*start, etc.
    Example with interval_start_days=1: 1, 1, 2, 3, 5, 8, 13 days.

    Args:
        level: Progress level (1-based, clamped to [1, max_level])
        interval_start_days: Interval in days for level 1
        max_level: Highest level (defaults to settings.max_level)

    Returns:
        Interval in days
    """
    level = clamp_level(level, max_level)

    if level <= 2:
        return interval_start_days

    fib_prev = interval_start_days
    fib_curr = interval_start_days
    for _ in range(3, level + 1):
        fib_prev, fib_curr = fib_curr, fib_prev + fib_curr

    return fib_curr


def calculate_doubling_interval(
    level: int,
    interval_start_days: int,
    max_level: Optional[int] = None
) -> int:
    """Calculate review interval in days, doubling with each level (1, 2, 4, 8...)."""
    level = clamp_level(level, max_level)
    return interval_start_days * 2 ** (level - 1)


class FibonacciProjector:
    """Projector whose intervals follow the Fibonacci sequence."""

    def __init__(self, start_days: int = 1, max_level: Optional[int] = None):
        if start_days < 1:
            raise ValidationError("start_days must be >= 1")
        self.start_days = start_days
        self.max_level = max_level

    def project(self, due_at: datetime, level: int) -> datetime:
        days = calculate_fibonacci_interval(level, self.start_days, self.max_level)
        return due_at + timedelta(days=days)


class DoublingProjector:
    """Projector whose intervals double with every level."""

    def __init__(self, start_days: int = 1, max_level: Optional[int] = None):
        if start_days < 1:
            raise ValidationError("start_days must be >= 1")
        self.start_days = start_days
        self.max_level = max_level

    def project(self, due_at: datetime, level: int) -> datetime:
        days = calculate_doubling_interval(level, self.start_days, self.max_level)
        return due_at + timedelta(days=days)


def get_projector(
    algorithm: Optional[str] = None,
    start_days: Optional[int] = None
) -> Projector:
    """
    Build the projector selected by configuration.

    Args:
        algorithm: 'fibonacci' or 'doubling' (defaults to settings.projector_algorithm)
        start_days: Interval unit for level 1 (defaults to settings.projector_start_days)

    Returns:
        A projector instance

    Raises:
        ValidationError: If the algorithm name is unknown
    """
    algorithm = (algorithm or settings.projector_algorithm).lower()
    start_days = start_days if start_days is not None else settings.projector_start_days

    try:
        kind = ProjectorAlgorithm(algorithm)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid projector algorithm: {algorithm}. Must be one of: "
            f"{', '.join(a.value for a in ProjectorAlgorithm)}"
        ) from exc

    if kind == ProjectorAlgorithm.DOUBLING:
        return DoublingProjector(start_days)
    return FibonacciProjector(start_days)
