from django.urls import path

from .views import PropertyDetailAPIView, PropertyListCreateAPIView, PropertyOverviewAPIView


urlpatterns = [
    path("", PropertyListCreateAPIView.as_view(), name="property-list"),
    path("summary/overview/", PropertyOverviewAPIView.as_view(), name="property-overview"),
    path("<int:property_id>/", PropertyDetailAPIView.as_view(), name="property-detail"),
]
