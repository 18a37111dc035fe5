# mic_core/clients/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mic_core.clients.models import Client


def list_clients(*, include_inactive: bool = False, q: str | None = None) -> QuerySet[Client]:
    qs = Client.objects.all()
    if not include_inactive:
        qs = qs.filter(is_active=True)

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(full_name__icontains=qv)

    return qs.order_by("full_name")


def get_active_client(client_id) -> Client:
    """Raises Client.DoesNotExist for unknown ids, ValueError for deactivated clients."""
    client = Client.objects.get(id=client_id)
    if not client.is_active:
        raise ValueError("Deze cliënt is niet meer actief.")
    return client
