from django.urls import path

from .views import (
    AttendanceBulkAPIView,
    AttendanceDetailAPIView,
    AttendanceListCreateAPIView,
    AttendanceOverviewAPIView,
    AttendanceWorkerSummaryAPIView,
)


urlpatterns = [
    path("", AttendanceListCreateAPIView.as_view(), name="attendance-list"),
    path("bulk/", AttendanceBulkAPIView.as_view(), name="attendance-bulk"),
    path("summary/worker/<int:worker_id>/", AttendanceWorkerSummaryAPIView.as_view(), name="attendance-worker-summary"),
    path("summary/overview/", AttendanceOverviewAPIView.as_view(), name="attendance-overview"),
    path("<int:attendance_id>/", AttendanceDetailAPIView.as_view(), name="attendance-detail"),
]
