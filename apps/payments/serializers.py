from rest_framework import serializers

from .models import Payment


WORKER_PAYMENT_MODES = (Payment.Mode.CASH, Payment.Mode.UPI)


class WorkerPaymentSerializer(serializers.ModelSerializer):
    worker_name = serializers.CharField(source="worker.name", read_only=True)

    class Meta:
        model = Payment
        fields = (
            "id",
            "worker",
            "worker_name",
            "amount",
            "date",
            "payment_mode",
            "description",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class WorkerPaymentWriteSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    date = serializers.DateField()
    payment_mode = serializers.ChoiceField(choices=WORKER_PAYMENT_MODES)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def validate_description(self, value: str) -> str:
        return value.strip()


class WorkerPaymentUpdateSerializer(WorkerPaymentWriteSerializer):
    worker_id = None


class CultivationPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = (
            "id",
            "cultivation",
            "amount",
            "paid_to",
            "payment_mode",
            "date",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class CultivationPaymentWriteSerializer(serializers.Serializer):
    cultivation_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    paid_to = serializers.CharField(max_length=100)
    payment_mode = serializers.ChoiceField(choices=Payment.Mode.choices)
    date = serializers.DateField(required=False)

    def validate_paid_to(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Paid To is required.")
        return value


class CultivationPaymentUpdateSerializer(CultivationPaymentWriteSerializer):
    cultivation_id = None
