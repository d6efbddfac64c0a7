from django.db import transaction
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.attendance.serializers import AttendanceSerializer
from apps.attendance.services import AttendanceService
from apps.payments.models import Payment
from apps.payments.serializers import WorkerPaymentSerializer

from .audit import WorkersAuditService
from .models import Worker
from .serializers import WorkerSerializer
from .services import WorkerService


class WorkerListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        workers = Worker.objects.all().order_by("-created_at", "-id")
        return Response(WorkerSerializer(workers, many=True).data)

    def post(self, request):
        serializer = WorkerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        worker = WorkerService.create(**serializer.validated_data)
        WorkersAuditService.log_worker_created(request, worker)
        return Response(WorkerSerializer(worker).data, status=status.HTTP_201_CREATED)


class WorkerDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, worker_id: int):
        worker = Worker.objects.filter(id=worker_id).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        attendance = worker.attendance_records.all().order_by("-date", "-id")
        payments = Payment.objects.filter(kind=Payment.Kind.WORKER, worker=worker).order_by("-date", "-id")

        payload = WorkerSerializer(worker).data
        payload["attendance"] = AttendanceSerializer(attendance, many=True).data
        payload["payments"] = WorkerPaymentSerializer(payments, many=True).data
        payload["attendance_summary"] = AttendanceService.summarize(attendance)
        payload["payment_summary"] = WorkerService.payment_summary(worker=worker, payments=payments)
        return Response(payload)

    def put(self, request, worker_id: int):
        worker = Worker.objects.filter(id=worker_id).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = WorkerSerializer(worker, data=request.data, partial=request.method == "PATCH")
        serializer.is_valid(raise_exception=True)
        changed_fields = [
            name for name, value in serializer.validated_data.items()
            if getattr(worker, name) != value
        ]
        worker = serializer.save()
        if changed_fields:
            WorkersAuditService.log_worker_updated(request, worker, changed_fields=changed_fields)
        return Response(WorkerSerializer(worker).data)

    def patch(self, request, worker_id: int):
        return self.put(request, worker_id)

    def delete(self, request, worker_id: int):
        worker = Worker.objects.filter(id=worker_id).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        name = worker.name
        with transaction.atomic():
            worker.delete()
        WorkersAuditService.log_worker_deleted(request, worker_id=worker_id, name=name)
        return Response({"detail": "Worker deleted successfully."}, status=status.HTTP_200_OK)
