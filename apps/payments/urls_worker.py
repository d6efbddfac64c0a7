from django.urls import path

from .views import (
    WorkerPaymentCreateAPIView,
    WorkerPaymentDetailAPIView,
    WorkerPaymentListAPIView,
)


urlpatterns = [
    path("", WorkerPaymentCreateAPIView.as_view(), name="worker-payment-create"),
    path("worker/<int:worker_id>/", WorkerPaymentListAPIView.as_view(), name="worker-payment-list"),
    path("<int:payment_id>/", WorkerPaymentDetailAPIView.as_view(), name="worker-payment-detail"),
]
