from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="IncidentType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=128)),
                ("description", models.TextField(blank=True, null=True)),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("fysiek", "Fysiek"),
                            ("verbaal", "Verbaal"),
                            ("emotioneel", "Emotioneel"),
                            ("sociaal", "Sociaal"),
                        ],
                        max_length=32,
                        null=True,
                    ),
                ),
                (
                    "severity_level",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("requires_notification", models.BooleanField(default=False)),
                ("color_code", models.CharField(blank=True, max_length=16, null=True)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "db_table": "incidents_incident_type",
                "ordering": ["category", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("severity_level__isnull", True),
                            models.Q(("severity_level__gte", 1), ("severity_level__lte", 5)),
                            _connector="OR",
                        ),
                        name="ck_incident_type_severity_range",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="IncidentLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("log_date", models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                (
                    "count",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("location", models.CharField(blank=True, max_length=128, null=True)),
                ("severity", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("time_of_day", models.TimeField(blank=True, null=True)),
                ("triggered_by", models.CharField(blank=True, max_length=255, null=True)),
                ("intervention_successful", models.BooleanField(default=True)),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incident_logs",
                        to="clients.client",
                    ),
                ),
                (
                    "incident_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="logs",
                        to="incidents.incidenttype",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incident_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "incidents_incident_log",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "log_date"], name="incident_log_user_date_idx"),
                    models.Index(fields=["client", "log_date"], name="incident_log_client_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("count__gte", 1)),
                        name="ck_incident_log_count_positive",
                    )
                ],
            },
        ),
    ]
