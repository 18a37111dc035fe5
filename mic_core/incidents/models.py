# mic_core/incidents/models.py
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from mic_core.clients.models import Client
from mic_core.common.models import TimeStampedModel


class Category(models.TextChoices):
    FYSIEK = "fysiek", "Fysiek"
    VERBAAL = "verbaal", "Verbaal"
    EMOTIONEEL = "emotioneel", "Emotioneel"
    SOCIAAL = "sociaal", "Sociaal"


class IncidentType(TimeStampedModel):
    """
    Taxonomy entry staff tap to register an incident.
    Soft-deactivated via is_active; logs keep pointing at it.
    """
    name = models.CharField(max_length=128)
    description = models.TextField(null=True, blank=True)
    category = models.CharField(max_length=32, choices=Category.choices, null=True, blank=True)
    severity_level = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    requires_notification = models.BooleanField(default=False)

    # "#rrggbb"; empty means derive from category/severity
    color_code = models.CharField(max_length=16, null=True, blank=True)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "incidents_incident_type"
        ordering = ["category", "name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(severity_level__isnull=True) | Q(severity_level__gte=1, severity_level__lte=5),
                name="ck_incident_type_severity_range",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class IncidentLog(models.Model):
    """
    One registration (count >= 1) of an incident type for a client on a date,
    owned by the staff member who logged it.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="incident_logs")
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name="incident_logs")
    incident_type = models.ForeignKey(IncidentType, on_delete=models.PROTECT, related_name="logs")

    log_date = models.DateField(default=timezone.localdate, db_index=True)
    count = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    notes = models.TextField(null=True, blank=True)
    location = models.CharField(max_length=128, null=True, blank=True)
    severity = models.PositiveSmallIntegerField(null=True, blank=True)
    time_of_day = models.TimeField(null=True, blank=True)
    triggered_by = models.CharField(max_length=255, null=True, blank=True)
    intervention_successful = models.BooleanField(default=True)

    class Meta:
        db_table = "incidents_incident_log"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(condition=Q(count__gte=1), name="ck_incident_log_count_positive"),
        ]
        indexes = [
            models.Index(fields=["user", "log_date"], name="incident_log_user_date_idx"),
            models.Index(fields=["client", "log_date"], name="incident_log_client_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.log_date} {self.client_id} {self.incident_type_id} x{self.count}"
