"""
Cells models - cell groups, rosters, visitors, weekly reports, health history.

Models:
- Zone / CellStatus: lookup tables referenced by cell groups
- CellGroup: Small fellowship group with a leader and a roster
- CellGroupMembership: Roster row linking a member to a cell group
- Visitor: Guest attending cell meetings, followed up until converted
- WeeklyReport: One cell meeting (attendees, absentees, visitors, notes)
- HealthHistoryRecord: Append-only health score audit trail
"""
from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel
from apps.core.constants import (
    CellMembershipRole, VisitorStatus, FollowUpStatus,
)


# =============================================================================
# LOOKUPS
# =============================================================================

class Zone(BaseModel):
    """Geographic or pastoral zone grouping several cell groups."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_('Nom')
    )

    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    class Meta:
        verbose_name = _('Zone')
        verbose_name_plural = _('Zones')
        ordering = ['name']

    def __str__(self):
        return self.name


class CellStatus(BaseModel):
    """Status label for a cell group (e.g. active, multiplying, closed)."""

    name = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Nom')
    )

    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    class Meta:
        verbose_name = _('Statut de cellule')
        verbose_name_plural = _('Statuts de cellule')
        ordering = ['name']

    def __str__(self):
        return self.name


# =============================================================================
# CELL GROUP
# =============================================================================

class CellGroup(BaseModel):
    """
    Cell group with a leader and a roster of members.

    health_score is only written through health history submissions.
    """

    name = models.CharField(
        max_length=200,
        verbose_name=_('Nom de la cellule')
    )

    zone = models.ForeignKey(
        Zone,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cell_groups',
        verbose_name=_('Zone')
    )

    leader = models.ForeignKey(
        'members.Member',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='led_cell_groups',
        verbose_name=_('Leader')
    )

    location = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Lieu de réunion')
    )

    status = models.ForeignKey(
        CellStatus,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cell_groups',
        verbose_name=_('Statut')
    )

    health_score = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_('Score de santé')
    )

    members = models.ManyToManyField(
        'members.Member',
        through='CellGroupMembership',
        related_name='cell_groups',
        blank=True,
        verbose_name=_('Membres')
    )

    class Meta:
        verbose_name = _('Cellule')
        verbose_name_plural = _('Cellules')
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def member_count(self):
        """Return the number of active roster rows."""
        return self.memberships.filter(is_active=True).count()

    def roster_ids(self):
        """Return the ids of members currently on the roster."""
        return set(
            self.memberships.filter(is_active=True).values_list('member_id', flat=True)
        )


class CellGroupMembership(BaseModel):
    """
    Roster row of a member in a cell group.

    Deactivating the row removes the member from the roster without
    touching historical reports.
    """

    member = models.ForeignKey(
        'members.Member',
        on_delete=models.CASCADE,
        related_name='cell_memberships',
        verbose_name=_('Membre')
    )

    cell_group = models.ForeignKey(
        CellGroup,
        on_delete=models.CASCADE,
        related_name='memberships',
        verbose_name=_('Cellule')
    )

    role = models.CharField(
        max_length=20,
        choices=CellMembershipRole.CHOICES,
        default=CellMembershipRole.MEMBER,
        verbose_name=_('Rôle dans la cellule')
    )

    joined_date = models.DateField(
        auto_now_add=True,
        verbose_name=_('Date d\'adhésion')
    )

    class Meta:
        verbose_name = _('Adhésion à la cellule')
        verbose_name_plural = _('Adhésions aux cellules')
        unique_together = ['member', 'cell_group']
        ordering = ['cell_group__name', 'member__last_name']

    def __str__(self):
        return f'{self.member.full_name} - {self.cell_group.name}'


# =============================================================================
# VISITOR
# =============================================================================

class Visitor(BaseModel):
    """
    Guest attending cell meetings.

    Converted visitors are never offered for new reports but stay
    addressable for historical report rendering.
    """

    first_name = models.CharField(
        max_length=100,
        verbose_name=_('Prénom')
    )

    surname = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Nom')
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Téléphone')
    )

    email = models.EmailField(
        blank=True,
        verbose_name=_('Courriel')
    )

    date_of_first_visit = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Date de première visite')
    )

    how_heard = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Comment a-t-il entendu parler de nous')
    )

    invited_by = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_('Invité par')
    )

    cell_group = models.ForeignKey(
        CellGroup,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_visitors',
        verbose_name=_('Cellule')
    )

    member = models.ForeignKey(
        'members.Member',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='visitor_records',
        verbose_name=_('Membre (après conversion)')
    )

    status = models.CharField(
        max_length=20,
        choices=VisitorStatus.choices,
        default=VisitorStatus.NEW,
        verbose_name=_('Statut')
    )

    follow_up_status = models.CharField(
        max_length=20,
        choices=FollowUpStatus.choices,
        default=FollowUpStatus.PENDING,
        verbose_name=_('Statut du suivi')
    )

    next_follow_up_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Prochain suivi')
    )

    notes = models.TextField(
        blank=True,
        verbose_name=_('Notes')
    )

    class Meta:
        verbose_name = _('Visiteur')
        verbose_name_plural = _('Visiteurs')
        ordering = ['first_name', 'surname']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return ' '.join(filter(None, [self.first_name, self.surname]))

    @property
    def is_converted(self):
        return self.status == VisitorStatus.CONVERTED


# =============================================================================
# WEEKLY REPORT
# =============================================================================

class WeeklyReport(BaseModel):
    """
    Report of a single cell meeting.

    absentees are derived from the roster at submission time and frozen,
    so later roster changes never alter historical reports.
    """

    cell_group = models.ForeignKey(
        CellGroup,
        on_delete=models.CASCADE,
        related_name='weekly_reports',
        verbose_name=_('Cellule')
    )

    date_of_meeting = models.DateField(
        verbose_name=_('Date de la réunion')
    )

    leader = models.ForeignKey(
        'members.Member',
        on_delete=models.PROTECT,
        related_name='led_reports',
        verbose_name=_('Leader')
    )

    attendees = models.ManyToManyField(
        'members.Member',
        related_name='attended_reports',
        blank=True,
        verbose_name=_('Présents')
    )

    absentees = models.ManyToManyField(
        'members.Member',
        related_name='absent_reports',
        blank=True,
        verbose_name=_('Absents')
    )

    absentee_reasons = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Raisons d\'absence'),
        help_text=_('Identifiant du membre absent -> raison')
    )

    visitors = models.ManyToManyField(
        Visitor,
        related_name='reports',
        blank=True,
        verbose_name=_('Visiteurs')
    )

    attendance = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Présence déclarée'),
        help_text=_('Utilisé lorsque la liste des présents est vide')
    )

    topic = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Sujet')
    )

    testimonies = models.TextField(
        blank=True,
        verbose_name=_('Témoignages')
    )

    prayer_requests = models.TextField(
        blank=True,
        verbose_name=_('Sujets de prière')
    )

    follow_ups = models.TextField(
        blank=True,
        verbose_name=_('Suivis')
    )

    challenges = models.TextField(
        blank=True,
        verbose_name=_('Défis')
    )

    support_needed = models.TextField(
        blank=True,
        verbose_name=_('Soutien requis')
    )

    class Meta:
        verbose_name = _('Rapport hebdomadaire')
        verbose_name_plural = _('Rapports hebdomadaires')
        ordering = ['-date_of_meeting', 'id']
        indexes = [
            models.Index(fields=['cell_group', 'date_of_meeting'], name='cells_weekl_cell_gr_8a41c2_idx'),
        ]

    def __str__(self):
        return f'{self.cell_group.name} ({self.date_of_meeting})'


# =============================================================================
# HEALTH HISTORY
# =============================================================================

class HealthHistoryRecord(BaseModel):
    """Append-only audit row of a cell group's health score."""

    cell_group = models.ForeignKey(
        CellGroup,
        on_delete=models.CASCADE,
        related_name='health_history',
        verbose_name=_('Cellule')
    )

    report_date = models.DateField(
        verbose_name=_('Date')
    )

    health_score = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_('Score de santé')
    )

    attendance = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal('0'),
        validators=[MinValueValidator(0), MaxValueValidator(1)],
        verbose_name=_('Taux de présence'),
        help_text=_('Fraction entre 0 et 1')
    )

    notes = models.TextField(
        blank=True,
        verbose_name=_('Notes')
    )

    class Meta:
        verbose_name = _('Historique de santé')
        verbose_name_plural = _('Historiques de santé')
        ordering = ['report_date', 'created_at']

    def __str__(self):
        return f'{self.cell_group.name} - {self.report_date}: {self.health_score}'
