from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.agriculture.models import Cultivation
from apps.workers.models import Worker

from .audit import PaymentsAuditService
from .models import Payment
from .serializers import (
    CultivationPaymentSerializer,
    CultivationPaymentUpdateSerializer,
    CultivationPaymentWriteSerializer,
    WorkerPaymentSerializer,
    WorkerPaymentUpdateSerializer,
    WorkerPaymentWriteSerializer,
)
from .services import PaymentService


# ================= CULTIVATION PAYMENTS =================

class CultivationPaymentCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=CultivationPaymentWriteSerializer,
        responses={201: OpenApiResponse(response=CultivationPaymentSerializer, description="Payment recorded")},
    )
    def post(self, request):
        serializer = CultivationPaymentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        cultivation = Cultivation.objects.filter(id=data.pop("cultivation_id")).first()
        if not cultivation:
            return Response({"detail": "Cultivation not found."}, status=status.HTTP_404_NOT_FOUND)

        payment = PaymentService.create_cultivation_payment(cultivation=cultivation, **data)
        PaymentsAuditService.log_cultivation_payment_created(request, payment)
        return Response(CultivationPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class CultivationPaymentListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, cultivation_id: int):
        payments = Payment.objects.filter(
            kind=Payment.Kind.CULTIVATION,
            cultivation_id=cultivation_id,
        ).order_by("-date", "-id")
        return Response(CultivationPaymentSerializer(payments, many=True).data)


class CultivationPaymentDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_payment(self, payment_id: int):
        return Payment.objects.filter(id=payment_id, kind=Payment.Kind.CULTIVATION).first()

    def get(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(CultivationPaymentSerializer(payment).data)

    def put(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = CultivationPaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed_fields = PaymentService.update_cultivation_payment(payment=payment, **serializer.validated_data)
        if changed_fields:
            PaymentsAuditService.log_cultivation_payment_updated(request, payment, changed_fields=changed_fields)
        return Response(CultivationPaymentSerializer(payment).data)

    def delete(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)

        cultivation_id = payment.cultivation_id
        PaymentService.delete_cultivation_payment(payment=payment)
        PaymentsAuditService.log_cultivation_payment_deleted(
            request,
            payment_id=payment_id,
            cultivation_id=cultivation_id,
        )
        return Response({"detail": "Payment deleted successfully."}, status=status.HTTP_200_OK)


# ================= WORKER PAYMENTS =================

class WorkerPaymentCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=WorkerPaymentWriteSerializer,
        responses={201: OpenApiResponse(response=WorkerPaymentSerializer, description="Payment recorded")},
    )
    def post(self, request):
        serializer = WorkerPaymentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        worker = Worker.objects.filter(id=data.pop("worker_id")).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        payment = PaymentService.create_worker_payment(worker=worker, **data)
        PaymentsAuditService.log_worker_payment_created(request, payment)
        return Response(WorkerPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class WorkerPaymentListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, worker_id: int):
        payments = (
            Payment.objects.select_related("worker")
            .filter(kind=Payment.Kind.WORKER, worker_id=worker_id)
            .order_by("-date", "-id")
        )
        return Response(WorkerPaymentSerializer(payments, many=True).data)


class WorkerPaymentDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_payment(self, payment_id: int):
        return Payment.objects.select_related("worker").filter(id=payment_id, kind=Payment.Kind.WORKER).first()

    def get(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(WorkerPaymentSerializer(payment).data)

    def put(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = WorkerPaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed_fields = PaymentService.update_worker_payment(payment=payment, **serializer.validated_data)
        if changed_fields:
            PaymentsAuditService.log_worker_payment_updated(request, payment, changed_fields=changed_fields)
        return Response(WorkerPaymentSerializer(payment).data)

    def delete(self, request, payment_id: int):
        payment = self._get_payment(payment_id)
        if not payment:
            return Response({"detail": "Payment not found."}, status=status.HTTP_404_NOT_FOUND)

        worker_id = payment.worker_id
        payment.delete()
        PaymentsAuditService.log_worker_payment_deleted(request, payment_id=payment_id, worker_id=worker_id)
        return Response({"detail": "Payment deleted successfully."}, status=status.HTTP_200_OK)
