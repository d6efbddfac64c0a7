from rest_framework import serializers

from apps.payments.serializers import CultivationPaymentSerializer

from .models import Cultivation, Person


class PersonSerializer(serializers.ModelSerializer):
    phone = serializers.RegexField(
        regex=r"^\+?[0-9]{10,15}$",
        max_length=15,
        required=False,
        allow_blank=True,
        error_messages={"invalid": "Invalid phone number."},
    )

    class Meta:
        model = Person
        fields = ("id", "name", "phone", "address", "notes", "created_at", "updated_at")
        read_only_fields = ("created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class CultivationSerializer(serializers.ModelSerializer):
    person_name = serializers.SerializerMethodField()
    profit = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Cultivation
        fields = (
            "id",
            "person",
            "person_name",
            "crop_name",
            "area",
            "rate_per_bigha",
            "total_cost",
            "paid_to",
            "buyer_name",
            "amount_received",
            "amount_pending",
            "profit",
            "payment_mode",
            "cultivation_date",
            "harvest_date",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_person_name(self, obj):
        return obj.person.name if obj.person_id else None


class CultivationWithPaymentsSerializer(CultivationSerializer):
    payments = CultivationPaymentSerializer(many=True, read_only=True)

    class Meta(CultivationSerializer.Meta):
        fields = CultivationSerializer.Meta.fields + ("payments",)
        read_only_fields = fields


class CultivationWriteSerializer(serializers.ModelSerializer):
    person = serializers.PrimaryKeyRelatedField(queryset=Person.objects.none())
    area = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    rate_per_bigha = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    amount_received = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Cultivation
        fields = (
            "person",
            "crop_name",
            "area",
            "rate_per_bigha",
            "paid_to",
            "buyer_name",
            "amount_received",
            "payment_mode",
            "cultivation_date",
            "harvest_date",
            "notes",
        )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is not None:
            self.fields["person"].queryset = Person.objects.filter(created_by=request.user)

    def validate_crop_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Crop name is required.")
        return value


class CultivationFilterSerializer(serializers.Serializer):
    crop_name = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    payment_mode = serializers.ChoiceField(choices=Cultivation.PaymentMode.choices, required=False)
