"""
Members models - Member profiles.

Models:
- Member: Person who can sit on a cell group roster or lead a cell group
"""
from django.contrib.auth import get_user_model
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel
from apps.core.constants import Roles

User = get_user_model()


# =============================================================================
# MEMBER MODEL
# =============================================================================

class Member(BaseModel):
    """
    Church member profile.

    Members can be linked to a Django User for authentication.
    The analytics engine only ever reads members.
    """

    # Link to Django User (optional, for authentication)
    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='member_profile',
        verbose_name=_('Compte utilisateur')
    )

    first_name = models.CharField(
        max_length=100,
        verbose_name=_('Prénom')
    )

    last_name = models.CharField(
        max_length=100,
        verbose_name=_('Nom')
    )

    email = models.EmailField(
        blank=True,
        verbose_name=_('Courriel')
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Téléphone')
    )

    # Role in the church; group_leader marks cell leaders
    role = models.CharField(
        max_length=20,
        choices=Roles.CHOICES,
        default=Roles.MEMBER,
        verbose_name=_('Rôle')
    )

    class Meta:
        verbose_name = _('Membre')
        verbose_name_plural = _('Membres')
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['last_name', 'first_name'], name='members_mem_last_na_2f1d3c_idx'),
            models.Index(fields=['role'], name='members_mem_role_6b0e1a_idx'),
        ]

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        """Return full name."""
        return f'{self.first_name} {self.last_name}'

    @property
    def is_leader(self):
        """Check if member carries a leader role."""
        return self.role in Roles.LEADER_ROLES
