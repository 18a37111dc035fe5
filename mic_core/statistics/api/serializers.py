# mic_core/statistics/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class DailyTotalSerializer(serializers.Serializer):
    log_date = serializers.DateField()
    user_id = serializers.IntegerField()
    client_id = serializers.UUIDField()
    incident_type_id = serializers.IntegerField()
    category = serializers.CharField(allow_null=True)
    total_count = serializers.IntegerField()


class MonthlySummarySerializer(serializers.Serializer):
    month = serializers.DateField()
    user_id = serializers.IntegerField()
    incident_type_id = serializers.IntegerField()
    category = serializers.CharField(allow_null=True)
    unique_clients = serializers.IntegerField()
    total_incidents = serializers.IntegerField()


class DailyPointSerializer(serializers.Serializer):
    date = serializers.DateField()
    count = serializers.IntegerField()


class StatisticsTotalsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    clients = serializers.IntegerField()
    types = serializers.IntegerField()
