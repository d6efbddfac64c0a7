from django.urls import path

from .views import PersonDetailAPIView, PersonListCreateAPIView


urlpatterns = [
    path("", PersonListCreateAPIView.as_view(), name="person-list"),
    path("<int:person_id>/", PersonDetailAPIView.as_view(), name="person-detail"),
]
