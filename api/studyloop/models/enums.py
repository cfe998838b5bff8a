"""
Model enums.
"""
from enum import Enum


class ProjectorAlgorithm(str, Enum):
    """Interval growth rules available to the review projector."""
    FIBONACCI = "fibonacci"
    DOUBLING = "doubling"
