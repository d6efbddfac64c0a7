from django.conf import settings
from django.contrib.auth import authenticate
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit import AuditEvents, log_event

from .models import User
from .serializers import (
    LoginSerializer,
    OTPRequestSerializer,
    OTPVerifySerializer,
    RegisterSerializer,
    UserSerializer,
)
from .services import OTPService
from .tokens import issue_tokens


def _get_ip(request):
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


# ================= REGISTER =================

class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=RegisterSerializer, responses={201: OpenApiResponse(description="User created")})
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        log_event(
            action=AuditEvents.USER_REGISTERED,
            actor=user,
            object_type="user",
            object_id=str(user.id),
            category="user",
            ip_address=_get_ip(request),
        )
        return Response(
            {**issue_tokens(user), "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


# ================= LOGIN =================

class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=LoginSerializer, responses={200: OpenApiResponse(description="Tokens issued")})
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        identifier = serializer.validated_data["identifier"]
        password = serializer.validated_data["password"]

        existing_user = User.objects.filter(username=identifier).first()
        if not existing_user:
            existing_user = User.objects.filter(email__iexact=identifier).first()

        auth_username = existing_user.username if existing_user else identifier
        user = authenticate(username=auth_username, password=password)

        if not user:
            log_event(
                action=AuditEvents.LOGIN_FAILED,
                actor=existing_user,
                object_type="user",
                object_id=str(existing_user.id) if existing_user else "",
                level="warning",
                category="auth",
                ip_address=_get_ip(request),
                metadata={"login": identifier},
            )
            return Response({"detail": "Invalid credentials."}, status=status.HTTP_400_BAD_REQUEST)

        log_event(
            action=AuditEvents.LOGIN_SUCCESS,
            actor=user,
            object_type="user",
            object_id=str(user.id),
            category="auth",
            ip_address=_get_ip(request),
        )
        return Response({**issue_tokens(user), "user": UserSerializer(user).data}, status=status.HTTP_200_OK)


# ================= ME =================

class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


# ================= OTP =================

class OTPRequestView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = OTPRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        otp = OTPService.issue(mobile_number=serializer.validated_data["mobile_number"])

        log_event(
            action=AuditEvents.OTP_REQUESTED,
            object_type="otp",
            object_id=str(otp.id),
            category="auth",
            ip_address=_get_ip(request),
            metadata={"mobile_number": otp.mobile_number},
        )
        payload = {"detail": "OTP sent.", "expires_at": otp.expires_at}
        if settings.DEBUG:
            payload["code"] = otp.code
        return Response(payload, status=status.HTTP_201_CREATED)


class OTPVerifyView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = OTPVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        mobile_number = serializer.validated_data["mobile_number"]
        otp = OTPService.verify(mobile_number=mobile_number, code=serializer.validated_data["code"])

        if not otp:
            log_event(
                action=AuditEvents.OTP_VERIFY_FAILED,
                object_type="otp",
                level="warning",
                category="auth",
                ip_address=_get_ip(request),
                metadata={"mobile_number": mobile_number},
            )
            return Response({"detail": "Invalid or expired OTP."}, status=status.HTTP_400_BAD_REQUEST)

        log_event(
            action=AuditEvents.OTP_VERIFIED,
            object_type="otp",
            object_id=str(otp.id),
            category="auth",
            ip_address=_get_ip(request),
            metadata={"mobile_number": mobile_number},
        )
        return Response({"verified": True, "mobile_number": mobile_number}, status=status.HTTP_200_OK)
