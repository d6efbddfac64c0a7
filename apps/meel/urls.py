from django.urls import path

from .views import MeelDetailAPIView, MeelListCreateAPIView, MeelStatsAPIView


urlpatterns = [
    path("", MeelListCreateAPIView.as_view(), name="meel-list"),
    path("stats/overview/", MeelStatsAPIView.as_view(), name="meel-stats"),
    path("<int:meel_id>/", MeelDetailAPIView.as_view(), name="meel-detail"),
]
