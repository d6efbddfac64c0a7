from django.urls import path

from .views import (
    CultivationCropSummaryAPIView,
    CultivationDetailAPIView,
    CultivationListCreateAPIView,
)


urlpatterns = [
    path("", CultivationListCreateAPIView.as_view(), name="cultivation-list"),
    path("summary/crops/", CultivationCropSummaryAPIView.as_view(), name="cultivation-crop-summary"),
    path("<int:cultivation_id>/", CultivationDetailAPIView.as_view(), name="cultivation-detail"),
]
