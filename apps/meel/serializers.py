from decimal import Decimal

from rest_framework import serializers

from .models import Meel, MeelPartner


class MeelPartnerSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=100)
    mobile = serializers.CharField(min_length=10, max_length=15)
    contribution = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)

    class Meta:
        model = MeelPartner
        fields = ("name", "mobile", "contribution")

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Partner name is required.")
        return value


class MeelSerializer(serializers.ModelSerializer):
    crop_name = serializers.CharField(max_length=100)
    tag = serializers.CharField(max_length=50)
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    partners = MeelPartnerSerializer(many=True, required=False)
    created_by = serializers.CharField(source="created_by.username", read_only=True)
    total_partners = serializers.IntegerField(read_only=True)
    total_contribution = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Meel
        fields = (
            "id",
            "crop_name",
            "transaction_type",
            "transaction_mode",
            "partners",
            "total_cost",
            "tag",
            "created_by",
            "total_partners",
            "total_contribution",
            "pending_amount",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at")

    def validate_crop_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Crop name is required.")
        return value

    def validate_tag(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Tag is required.")
        return value

    def validate(self, attrs):
        instance = self.instance
        mode = attrs.get("transaction_mode", getattr(instance, "transaction_mode", None))
        kind = attrs.get("transaction_type", getattr(instance, "transaction_type", None))
        total_cost = attrs.get("total_cost", getattr(instance, "total_cost", None))

        if mode != Meel.TransactionMode.WITH_PARTNER:
            attrs["partners"] = []
            return attrs

        if "partners" in attrs:
            contributions = [partner["contribution"] for partner in attrs["partners"]]
        elif instance is not None:
            contributions = [partner.contribution for partner in instance.partners.all()]
        else:
            contributions = []

        if not contributions:
            raise serializers.ValidationError(
                {"partners": "Partners are required when transaction mode is With Partner."}
            )
        if kind == Meel.TransactionType.BUY and sum(contributions, Decimal("0")) > total_cost:
            raise serializers.ValidationError(
                {"partners": "Total contribution by partners cannot exceed total cost."}
            )
        return attrs


class MeelFilterSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=Meel.TransactionType.choices, required=False)
    transaction_mode = serializers.ChoiceField(choices=Meel.TransactionMode.choices, required=False)
    tag = serializers.CharField(max_length=50, required=False)
    crop_name = serializers.CharField(max_length=100, required=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


class MeelStatsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
