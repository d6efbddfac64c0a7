from rest_framework import serializers

from .models import Worker


class WorkerSerializer(serializers.ModelSerializer):
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)

    class Meta:
        model = Worker
        fields = (
            "id",
            "name",
            "phone",
            "address",
            "joining_date",
            "salary",
            "is_active",
            "notes",
            "total_working_days",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("total_working_days", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_phone(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Phone is required.")
        return value


class WorkerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Worker
        fields = ("id", "name", "phone")
