from django.urls import path

from .views import TelegramStatusAPIView, TelegramUsernameAPIView


urlpatterns = [
    path("add-telegram/", TelegramUsernameAPIView.as_view(), name="telegram-add"),
    path("status/", TelegramStatusAPIView.as_view(), name="telegram-status"),
]
