# mic_core/clients/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction

from mic_core.clients.models import Client

logger = logging.getLogger("mic.clients.services")


class ClientService:
    @staticmethod
    @transaction.atomic
    def create_client(*, full_name: str, is_active: bool = True, actor_user_id: int | None = None) -> Client:
        name = (full_name or "").strip()
        if not name:
            raise ValueError("Naam is verplicht.")

        client = Client.objects.create(full_name=name, is_active=is_active)
        logger.info("Client created id=%s by actor_user_id=%s", client.id, actor_user_id)
        return client

    @staticmethod
    @transaction.atomic
    def update_client(*, client_id: UUID, data: dict, actor_user_id: int | None = None) -> Client:
        client = Client.objects.select_for_update().get(id=client_id)

        allowed = {"full_name", "is_active"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        if "full_name" in updates:
            updates["full_name"] = (updates["full_name"] or "").strip()
            if not updates["full_name"]:
                raise ValueError("Naam is verplicht.")

        for k, v in updates.items():
            setattr(client, k, v)
        client.save()

        logger.info(
            "Client updated id=%s fields=%s by actor_user_id=%s",
            client.id,
            sorted(updates.keys()),
            actor_user_id,
        )
        return client
