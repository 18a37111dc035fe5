# mic_core/incidents/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mic_core.incidents.aggregation import color_for_incident_type
from mic_core.incidents.models import Category, IncidentType
from mic_core.incidents.types import IncidentTypeInfo

TIME_INPUT_FORMATS = ["%H:%M", "%H:%M:%S"]


# -----------------------------
# Incident types
# -----------------------------

class IncidentTypeSerializer(serializers.ModelSerializer):
    color = serializers.SerializerMethodField()

    class Meta:
        model = IncidentType
        fields = [
            "id",
            "name",
            "description",
            "category",
            "severity_level",
            "requires_notification",
            "color_code",
            "color",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields

    def get_color(self, obj) -> str:
        return color_for_incident_type(IncidentTypeInfo.from_model(obj))


class IncidentTypeWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    category = serializers.ChoiceField(choices=Category.choices, required=False, allow_null=True, allow_blank=True)
    severity_level = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    requires_notification = serializers.BooleanField(required=False)
    color_code = serializers.CharField(max_length=16, required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class IncidentTypeInfoSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    category = serializers.CharField(allow_null=True)
    severity_level = serializers.IntegerField(allow_null=True)
    color_code = serializers.CharField(allow_null=True)
    requires_notification = serializers.BooleanField()
    color = serializers.SerializerMethodField()

    def get_color(self, obj) -> str:
        return color_for_incident_type(obj)


# -----------------------------
# Incident logs
# -----------------------------

class IncidentLogRowSerializer(serializers.Serializer):
    """Raw or grouped row; combined_log_ids is null for single rows."""
    id = serializers.IntegerField()
    created_at = serializers.DateTimeField(allow_null=True)
    user_id = serializers.IntegerField(allow_null=True)
    client_id = serializers.UUIDField(allow_null=True)
    client_name = serializers.CharField(allow_null=True)
    incident_type_id = serializers.IntegerField(allow_null=True)
    incident_type = IncidentTypeInfoSerializer()
    log_date = serializers.DateField()
    count = serializers.IntegerField()
    location = serializers.CharField(allow_null=True)
    time_of_day = serializers.TimeField(format="%H:%M", allow_null=True)
    severity = serializers.IntegerField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    triggered_by = serializers.CharField(allow_null=True)
    intervention_successful = serializers.BooleanField()
    combined_log_ids = serializers.ListField(child=serializers.IntegerField(), allow_null=True)


class IncidentLogCreateSerializer(serializers.Serializer):
    client_id = serializers.UUIDField()
    incident_type_id = serializers.IntegerField()
    count = serializers.IntegerField(min_value=1, required=False, default=1)
    log_date = serializers.DateField(required=False, allow_null=True)
    location = serializers.CharField(max_length=128, required=False, allow_blank=True, allow_null=True)
    time_of_day = serializers.TimeField(input_formats=TIME_INPUT_FORMATS, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    triggered_by = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    intervention_successful = serializers.BooleanField(required=False, default=True)


class CountUpdateSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=1)


class GroupIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=1)


class GroupCountUpdateSerializer(GroupIdsSerializer):
    count = serializers.IntegerField(min_value=1)


# -----------------------------
# Aggregates
# -----------------------------

class TypeTotalSerializer(serializers.Serializer):
    name = serializers.CharField()
    count = serializers.IntegerField()
    category = serializers.CharField(allow_null=True)
    severity_level = serializers.IntegerField(allow_null=True)
    color_code = serializers.CharField(allow_null=True)
    color = serializers.CharField()
    log_ids = serializers.SerializerMethodField()

    def get_log_ids(self, obj) -> list[int]:
        ids: list[int] = []
        for row in obj.logs:
            ids.extend(row.member_ids)
        return ids


class CategoryTotalSerializer(serializers.Serializer):
    name = serializers.CharField()
    label = serializers.CharField()
    count = serializers.IntegerField()
    color = serializers.CharField()


class CategoryGroupSerializer(serializers.Serializer):
    name = serializers.CharField()
    label = serializers.CharField()
    color = serializers.CharField()
    types = TypeTotalSerializer(many=True)


class NamedCountSerializer(serializers.Serializer):
    name = serializers.CharField()
    count = serializers.IntegerField()


class HourBucketSerializer(serializers.Serializer):
    hour = serializers.CharField()
    count = serializers.IntegerField()


class SummarySerializer(serializers.Serializer):
    total_incidents = serializers.IntegerField()
    unique_clients = serializers.IntegerField()
    unique_days = serializers.IntegerField()
    intervention_success_rate = serializers.IntegerField()
