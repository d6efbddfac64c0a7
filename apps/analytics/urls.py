from django.urls import path

from .views import (
    AgricultureAnalyticsAPIView,
    DashboardAnalyticsAPIView,
    RealEstateAnalyticsAPIView,
    WorkerAnalyticsAPIView,
)


urlpatterns = [
    path("dashboard/", DashboardAnalyticsAPIView.as_view(), name="analytics-dashboard"),
    path("workers/", WorkerAnalyticsAPIView.as_view(), name="analytics-workers"),
    path("agriculture/", AgricultureAnalyticsAPIView.as_view(), name="analytics-agriculture"),
    path("real-estate/", RealEstateAnalyticsAPIView.as_view(), name="analytics-real-estate"),
]
