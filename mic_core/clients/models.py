# mic_core/clients/models.py
import uuid

from django.db import models

from mic_core.common.models import TimeStampedModel


class Client(TimeStampedModel):
    """
    Person in care about whom incidents are registered.
    Never hard-deleted: deactivate via is_active.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    full_name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "clients_client"
        ordering = ["full_name"]
        indexes = [
            models.Index(fields=["is_active", "full_name"], name="clients_active_name_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name
