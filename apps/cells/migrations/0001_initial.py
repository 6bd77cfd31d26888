import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def _base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de modification')),
        ('is_active', models.BooleanField(default=True, help_text='Indique si cet enregistrement est actif', verbose_name='Actif')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('members', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Zone',
            fields=_base_fields() + [
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Nom')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
            ],
            options={
                'verbose_name': 'Zone',
                'verbose_name_plural': 'Zones',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CellStatus',
            fields=_base_fields() + [
                ('name', models.CharField(max_length=50, unique=True, verbose_name='Nom')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
            ],
            options={
                'verbose_name': 'Statut de cellule',
                'verbose_name_plural': 'Statuts de cellule',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CellGroup',
            fields=_base_fields() + [
                ('name', models.CharField(max_length=200, verbose_name='Nom de la cellule')),
                ('location', models.CharField(blank=True, max_length=200, verbose_name='Lieu de réunion')),
                ('health_score', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name='Score de santé')),
                ('leader', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='led_cell_groups', to='members.member', verbose_name='Leader')),
                ('status', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cell_groups', to='cells.cellstatus', verbose_name='Statut')),
                ('zone', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cell_groups', to='cells.zone', verbose_name='Zone')),
            ],
            options={
                'verbose_name': 'Cellule',
                'verbose_name_plural': 'Cellules',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CellGroupMembership',
            fields=_base_fields() + [
                ('role', models.CharField(choices=[('member', 'Membre'), ('leader', 'Leader'), ('assistant', 'Assistant')], default='member', max_length=20, verbose_name='Rôle dans la cellule')),
                ('joined_date', models.DateField(auto_now_add=True, verbose_name="Date d'adhésion")),
                ('cell_group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='cells.cellgroup', verbose_name='Cellule')),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cell_memberships', to='members.member', verbose_name='Membre')),
            ],
            options={
                'verbose_name': 'Adhésion à la cellule',
                'verbose_name_plural': 'Adhésions aux cellules',
                'ordering': ['cell_group__name', 'member__last_name'],
                'unique_together': {('member', 'cell_group')},
            },
        ),
        migrations.AddField(
            model_name='cellgroup',
            name='members',
            field=models.ManyToManyField(blank=True, related_name='cell_groups', through='cells.CellGroupMembership', to='members.member', verbose_name='Membres'),
        ),
        migrations.CreateModel(
            name='Visitor',
            fields=_base_fields() + [
                ('first_name', models.CharField(max_length=100, verbose_name='Prénom')),
                ('surname', models.CharField(blank=True, max_length=100, verbose_name='Nom')),
                ('phone', models.CharField(blank=True, max_length=20, verbose_name='Téléphone')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Courriel')),
                ('date_of_first_visit', models.DateField(blank=True, null=True, verbose_name='Date de première visite')),
                ('how_heard', models.CharField(blank=True, max_length=200, verbose_name='Comment a-t-il entendu parler de nous')),
                ('invited_by', models.CharField(blank=True, max_length=200, verbose_name='Invité par')),
                ('status', models.CharField(choices=[('new', 'Nouveau'), ('followed_up', 'Suivi'), ('converted', 'Converti')], default='new', max_length=20, verbose_name='Statut')),
                ('follow_up_status', models.CharField(choices=[('pending', 'En attente'), ('in_progress', 'En cours'), ('done', 'Terminé')], default='pending', max_length=20, verbose_name='Statut du suivi')),
                ('next_follow_up_date', models.DateField(blank=True, null=True, verbose_name='Prochain suivi')),
                ('notes', models.TextField(blank=True, verbose_name='Notes')),
                ('cell_group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_visitors', to='cells.cellgroup', verbose_name='Cellule')),
                ('member', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='visitor_records', to='members.member', verbose_name='Membre (après conversion)')),
            ],
            options={
                'verbose_name': 'Visiteur',
                'verbose_name_plural': 'Visiteurs',
                'ordering': ['first_name', 'surname'],
            },
        ),
        migrations.CreateModel(
            name='WeeklyReport',
            fields=_base_fields() + [
                ('date_of_meeting', models.DateField(verbose_name='Date de la réunion')),
                ('absentee_reasons', models.JSONField(blank=True, default=dict, help_text='Identifiant du membre absent -> raison', verbose_name="Raisons d'absence")),
                ('attendance', models.PositiveIntegerField(blank=True, help_text='Utilisé lorsque la liste des présents est vide', null=True, verbose_name='Présence déclarée')),
                ('topic', models.CharField(blank=True, max_length=255, verbose_name='Sujet')),
                ('testimonies', models.TextField(blank=True, verbose_name='Témoignages')),
                ('prayer_requests', models.TextField(blank=True, verbose_name='Sujets de prière')),
                ('follow_ups', models.TextField(blank=True, verbose_name='Suivis')),
                ('challenges', models.TextField(blank=True, verbose_name='Défis')),
                ('support_needed', models.TextField(blank=True, verbose_name='Soutien requis')),
                ('absentees', models.ManyToManyField(blank=True, related_name='absent_reports', to='members.member', verbose_name='Absents')),
                ('attendees', models.ManyToManyField(blank=True, related_name='attended_reports', to='members.member', verbose_name='Présents')),
                ('cell_group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='weekly_reports', to='cells.cellgroup', verbose_name='Cellule')),
                ('leader', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='led_reports', to='members.member', verbose_name='Leader')),
                ('visitors', models.ManyToManyField(blank=True, related_name='reports', to='cells.visitor', verbose_name='Visiteurs')),
            ],
            options={
                'verbose_name': 'Rapport hebdomadaire',
                'verbose_name_plural': 'Rapports hebdomadaires',
                'ordering': ['-date_of_meeting', 'id'],
                'indexes': [
                    models.Index(fields=['cell_group', 'date_of_meeting'], name='cells_weekl_cell_gr_8a41c2_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HealthHistoryRecord',
            fields=_base_fields() + [
                ('report_date', models.DateField(verbose_name='Date')),
                ('health_score', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name='Score de santé')),
                ('attendance', models.DecimalField(decimal_places=3, default=Decimal('0'), help_text='Fraction entre 0 et 1', max_digits=4, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(1)], verbose_name='Taux de présence')),
                ('notes', models.TextField(blank=True, verbose_name='Notes')),
                ('cell_group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='health_history', to='cells.cellgroup', verbose_name='Cellule')),
            ],
            options={
                'verbose_name': 'Historique de santé',
                'verbose_name_plural': 'Historiques de santé',
                'ordering': ['report_date', 'created_at'],
            },
        ),
    ]
