from rest_framework import serializers


class DateRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date."})
        return attrs


class DashboardQuerySerializer(DateRangeQuerySerializer):
    category = serializers.ChoiceField(
        choices=("all", "workers", "agriculture", "real_estate"),
        required=False,
        default="all",
    )
