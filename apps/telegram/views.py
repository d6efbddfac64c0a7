from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User

from .audit import TelegramAuditService
from .serializers import TelegramUsernameSerializer


class TelegramUsernameAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=TelegramUsernameSerializer,
        responses={
            200: OpenApiResponse(description="Telegram username saved"),
            400: OpenApiResponse(description="Invalid or already registered username"),
        },
    )
    def post(self, request):
        serializer = TelegramUsernameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        telegram_username = serializer.validated_data["telegram_username"]

        taken = telegram_username is not None and (
            User.objects.filter(telegram_username__iexact=telegram_username)
            .exclude(id=request.user.id)
            .exists()
        )
        if taken:
            TelegramAuditService.log_username_conflict(request, telegram_username)
            return Response(
                {"detail": "Telegram username already registered with another user"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        previous = request.user.telegram_username
        if previous != telegram_username:
            request.user.telegram_username = telegram_username
            request.user.save(update_fields=["telegram_username"])
            TelegramAuditService.log_username_updated(request, previous, telegram_username)

        if telegram_username:
            message = "Telegram username updated successfully"
        else:
            message = "Telegram username removed successfully"
        return Response(
            {
                "message": message,
                "telegram_username": telegram_username,
            }
        )


class TelegramStatusAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"telegram_username": request.user.telegram_username or None})
