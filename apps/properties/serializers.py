from rest_framework import serializers

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    area = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    rate_per_unit = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    amount_paid = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    profit = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Property
        fields = (
            "id",
            "property_type",
            "area",
            "area_unit",
            "partner_name",
            "seller_name",
            "buyer_name",
            "rate_per_unit",
            "total_cost",
            "amount_paid",
            "amount_pending",
            "profit",
            "transaction_date",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("amount_pending", "created_at", "updated_at")

    def validate_partner_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Partner name is required.")
        return value


class PropertyFilterSerializer(serializers.Serializer):
    property_type = serializers.ChoiceField(choices=Property.Type.choices, required=False)
    partner_name = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
