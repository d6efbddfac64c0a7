from rest_framework import serializers

from apps.workers.serializers import WorkerBriefSerializer

from .models import Attendance
from .services import normalize_status


class AttendanceStatusField(serializers.CharField):
    default_error_messages = {
        "invalid_status": "Status must be one of: present, absent, half_day, leave.",
    }

    def to_internal_value(self, data):
        value = normalize_status(super().to_internal_value(data))
        if value is None:
            self.fail("invalid_status")
        return value


class AttendanceSerializer(serializers.ModelSerializer):
    worker = WorkerBriefSerializer(read_only=True)

    class Meta:
        model = Attendance
        fields = (
            "id",
            "worker",
            "date",
            "status",
            "check_in_time",
            "check_out_time",
            "working_hours",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AttendanceFieldsMixin(serializers.Serializer):
    check_in_time = serializers.TimeField(required=False, allow_null=True)
    check_out_time = serializers.TimeField(required=False, allow_null=True)
    working_hours = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=24,
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)

    def validate_notes(self, value):
        return (value or "").strip()


class AttendanceUpsertSerializer(AttendanceFieldsMixin):
    worker_id = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    status = AttendanceStatusField()


class AttendanceUpdateSerializer(AttendanceFieldsMixin):
    status = AttendanceStatusField(required=False)


class AttendanceBulkRowSerializer(AttendanceFieldsMixin):
    worker_id = serializers.IntegerField(min_value=1)
    status = AttendanceStatusField()


class AttendanceBulkSerializer(serializers.Serializer):
    date = serializers.DateField()
    attendance_data = serializers.ListField(child=serializers.DictField(), allow_empty=False)


class AttendanceFilterSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField(required=False, min_value=1)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    status = AttendanceStatusField(required=False)

    def validate(self, attrs):
        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date."})
        return attrs
