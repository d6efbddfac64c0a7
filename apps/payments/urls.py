from django.urls import path

from .views import (
    CultivationPaymentCreateAPIView,
    CultivationPaymentDetailAPIView,
    CultivationPaymentListAPIView,
)


urlpatterns = [
    path("", CultivationPaymentCreateAPIView.as_view(), name="cultivation-payment-create"),
    path(
        "cultivation/<int:cultivation_id>/",
        CultivationPaymentListAPIView.as_view(),
        name="cultivation-payment-list",
    ),
    path("<int:payment_id>/", CultivationPaymentDetailAPIView.as_view(), name="cultivation-payment-detail"),
]
