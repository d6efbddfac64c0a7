from django.urls import path

from .views import WorkerDetailAPIView, WorkerListCreateAPIView


urlpatterns = [
    path("", WorkerListCreateAPIView.as_view(), name="workers-list"),
    path("<int:worker_id>/", WorkerDetailAPIView.as_view(), name="workers-detail"),
]
