# mic_core/clients/api/views.py
from __future__ import annotations

from uuid import UUID

from rest_framework import status, viewsets
from rest_framework.response import Response

from mic_core.clients.api.serializers import ClientCreateSerializer, ClientSerializer, ClientUpdateSerializer
from mic_core.clients.models import Client
from mic_core.clients.selectors import list_clients
from mic_core.clients.services import ClientService
from mic_core.common.api.params import truthy
from mic_core.common.permissions import ReferenceDataPermission, is_super_admin


class ClientViewSet(viewsets.ViewSet):
    permission_classes = [ReferenceDataPermission]

    serializer_class = ClientSerializer
    queryset = Client.objects.none()

    def list(self, request):
        # staff only ever see active clients
        include_inactive = truthy(request.query_params.get("include_inactive")) and is_super_admin(request)

        qs = list_clients(include_inactive=include_inactive, q=request.query_params.get("q"))
        return Response(ClientSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        client = Client.objects.get(id=UUID(str(pk)))
        if not client.is_active and not is_super_admin(request):
            raise Client.DoesNotExist()
        return Response(ClientSerializer(client).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = ClientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        client = ClientService.create_client(actor_user_id=request.user.id, **ser.validated_data)
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = ClientUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        client = ClientService.update_client(
            client_id=UUID(str(pk)),
            data=ser.validated_data,
            actor_user_id=request.user.id,
        )
        return Response(ClientSerializer(client).data, status=status.HTTP_200_OK)
