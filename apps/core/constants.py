"""Centralized constants and choices for the application."""
from django.db import models
from django.utils.translation import gettext_lazy as _


class Roles:
    """Member role definitions."""
    MEMBER = 'member'
    GROUP_LEADER = 'group_leader'
    ZONE_LEADER = 'zone_leader'
    PASTOR = 'pastor'
    ADMIN = 'admin'

    CHOICES = [
        (MEMBER, _('Membre')),
        (GROUP_LEADER, _('Leader de cellule')),
        (ZONE_LEADER, _('Leader de zone')),
        (PASTOR, _('Pasteur')),
        (ADMIN, _('Administrateur')),
    ]

    LEADER_ROLES = [GROUP_LEADER, ZONE_LEADER, PASTOR]


class CellMembershipRole:
    """Role of a member inside a cell group roster."""
    MEMBER = 'member'
    LEADER = 'leader'
    ASSISTANT = 'assistant'

    CHOICES = [
        (MEMBER, _('Membre')),
        (LEADER, _('Leader')),
        (ASSISTANT, _('Assistant')),
    ]


class VisitorStatus(models.TextChoices):
    """Visitor lifecycle. CONVERTED is terminal."""
    NEW = 'new', _('Nouveau')
    FOLLOWED_UP = 'followed_up', _('Suivi')
    CONVERTED = 'converted', _('Converti')


class FollowUpStatus(models.TextChoices):
    """Visitor follow-up states, cycled by the follow-up workflow."""
    PENDING = 'pending', _('En attente')
    IN_PROGRESS = 'in_progress', _('En cours')
    DONE = 'done', _('Terminé')


# Wrap-around cycle: DONE goes back to PENDING.
FOLLOW_UP_TRANSITIONS = {
    FollowUpStatus.PENDING: FollowUpStatus.IN_PROGRESS,
    FollowUpStatus.IN_PROGRESS: FollowUpStatus.DONE,
    FollowUpStatus.DONE: FollowUpStatus.PENDING,
}


class PerformanceTrend(models.TextChoices):
    """Attendance momentum of a report relative to the previous one."""
    GROWING = 'growing', _('En croissance')
    DECLINING = 'declining', _('En déclin')
    STABLE = 'stable', _('Stable')


class HealthTier(models.TextChoices):
    """Health score tiers."""
    EXCELLENT = 'excellent', _('Excellent')
    GOOD = 'good', _('Bon')
    AVERAGE = 'average', _('Moyen')
    POOR = 'poor', _('Faible')


class HealthSortOrder:
    """Sort keys accepted by the health dashboard."""
    NAME = 'name'
    HEALTH = 'health'
    MEMBERS = 'members'

    CHOICES = [
        (NAME, _('Nom')),
        (HEALTH, _('Santé')),
        (MEMBERS, _('Membres')),
    ]


# Health tier lower bounds. EXCELLENT is strictly above its bound.
HEALTH_EXCELLENT_ABOVE = 90
HEALTH_GOOD_MIN = 70
HEALTH_AVERAGE_MIN = 50

# A member absent this many times in a row is flagged for follow-up.
FOLLOW_UP_STREAK_THRESHOLD = 3

# A report with more absentees than this is flagged.
HIGH_ABSENTEE_THRESHOLD = 5

# Visits to the same cell group above which a visitor is a repeat visitor.
REPEAT_VISIT_THRESHOLD = 1
