"""Deployment-tunable thresholds, defaulting to the named constants."""
from django.conf import settings

from apps.core.constants import FOLLOW_UP_STREAK_THRESHOLD, HIGH_ABSENTEE_THRESHOLD


def follow_up_streak_threshold():
    return getattr(settings, 'CELLS_FOLLOW_UP_STREAK_THRESHOLD', FOLLOW_UP_STREAK_THRESHOLD)


def high_absentee_threshold():
    return getattr(settings, 'CELLS_HIGH_ABSENTEE_THRESHOLD', HIGH_ABSENTEE_THRESHOLD)
