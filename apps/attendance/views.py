from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.workers.models import Worker
from apps.workers.serializers import WorkerBriefSerializer

from .audit import AttendanceAuditService
from .models import Attendance
from .serializers import (
    AttendanceBulkSerializer,
    AttendanceFilterSerializer,
    AttendanceSerializer,
    AttendanceUpdateSerializer,
    AttendanceUpsertSerializer,
)
from .services import AttendanceService


class AttendanceListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AttendanceFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        qs = Attendance.objects.select_related("worker")
        if filters.get("worker_id"):
            qs = qs.filter(worker_id=filters["worker_id"])
        if filters.get("start_date") and filters.get("end_date"):
            qs = qs.filter(date__range=(filters["start_date"], filters["end_date"]))
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])

        qs = qs.order_by("-date", "-id")
        return Response(AttendanceSerializer(qs, many=True).data)

    @extend_schema(
        request=AttendanceUpsertSerializer,
        responses={
            201: OpenApiResponse(response=AttendanceSerializer, description="Attendance created"),
            200: OpenApiResponse(response=AttendanceSerializer, description="Attendance updated"),
        },
    )
    def post(self, request):
        serializer = AttendanceUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        worker = Worker.objects.filter(id=data.pop("worker_id")).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        result = AttendanceService.upsert(
            worker=worker,
            day=data.pop("date"),
            status=data.pop("status"),
            **data,
        )
        if result.created:
            AttendanceAuditService.log_attendance_created(request, result.record)
            return Response(AttendanceSerializer(result.record).data, status=status.HTTP_201_CREATED)

        if result.changed_fields:
            AttendanceAuditService.log_attendance_updated(
                request,
                result.record,
                changed_fields=list(result.changed_fields),
            )
        return Response(AttendanceSerializer(result.record).data, status=status.HTTP_200_OK)


class AttendanceDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_record(self, attendance_id: int):
        return Attendance.objects.select_related("worker").filter(id=attendance_id).first()

    def get(self, request, attendance_id: int):
        record = self._get_record(attendance_id)
        if not record:
            return Response({"detail": "Attendance not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(AttendanceSerializer(record).data)

    def put(self, request, attendance_id: int):
        record = self._get_record(attendance_id)
        if not record:
            return Response({"detail": "Attendance not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = AttendanceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed_fields = AttendanceService.update(record=record, **serializer.validated_data)
        if changed_fields:
            AttendanceAuditService.log_attendance_updated(request, record, changed_fields=changed_fields)
        return Response(AttendanceSerializer(record).data)

    def delete(self, request, attendance_id: int):
        record = self._get_record(attendance_id)
        if not record:
            return Response({"detail": "Attendance not found."}, status=status.HTTP_404_NOT_FOUND)

        worker_id, day = record.worker_id, record.date
        AttendanceService.delete(record=record)
        AttendanceAuditService.log_attendance_deleted(
            request,
            attendance_id=attendance_id,
            worker_id=worker_id,
            day=day,
        )
        return Response({"detail": "Attendance deleted successfully."}, status=status.HTTP_200_OK)


class AttendanceBulkAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=AttendanceBulkSerializer, responses={201: OpenApiResponse(description="Per-row results")})
    def post(self, request):
        serializer = AttendanceBulkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = serializer.validated_data["date"]

        results = AttendanceService.bulk_upsert(day=day, rows=serializer.validated_data["attendance_data"])
        succeeded = sum(1 for item in results if item.success)
        AttendanceAuditService.log_bulk_created(
            request,
            day=day,
            succeeded=succeeded,
            failed=len(results) - succeeded,
        )
        return Response(
            {
                "date": day,
                "results": [item.as_dict() for item in results],
                "succeeded": succeeded,
                "failed": len(results) - succeeded,
            },
            status=status.HTTP_201_CREATED,
        )


class AttendanceWorkerSummaryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, worker_id: int):
        worker = Worker.objects.filter(id=worker_id).first()
        if not worker:
            return Response({"detail": "Worker not found."}, status=status.HTTP_404_NOT_FOUND)

        query = AttendanceFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        start_date = query.validated_data.get("start_date")
        end_date = query.validated_data.get("end_date")

        records = worker.attendance_records.all()
        if start_date and end_date:
            records = records.filter(date__range=(start_date, end_date))

        return Response(
            {
                "worker": WorkerBriefSerializer(worker).data,
                "start_date": start_date,
                "end_date": end_date,
                "summary": AttendanceService.summarize(records),
            }
        )


class AttendanceOverviewAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AttendanceFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(
            AttendanceService.overview(
                start_date=query.validated_data.get("start_date"),
                end_date=query.validated_data.get("end_date"),
            )
        )
