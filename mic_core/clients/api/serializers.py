# mic_core/clients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mic_core.clients.models import Client


class ClientCreateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    is_active = serializers.BooleanField(required=False, default=True)


class ClientUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PATCH).
    """
    full_name = serializers.CharField(max_length=255, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ["id", "full_name", "is_active", "created_at", "updated_at"]
        read_only_fields = fields
