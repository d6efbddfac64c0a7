from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import OTP


logger = logging.getLogger(__name__)


class OTPService:
    CODE_LENGTH = 6

    @classmethod
    def _generate_code(cls) -> str:
        return "".join(secrets.choice("0123456789") for _ in range(cls.CODE_LENGTH))

    @classmethod
    def issue(cls, *, mobile_number: str) -> OTP:
        ttl = timedelta(minutes=getattr(settings, "OTP_TTL_MINUTES", 10))
        otp = OTP.objects.create(
            mobile_number=mobile_number,
            code=cls._generate_code(),
            expires_at=timezone.now() + ttl,
        )
        logger.info("OTP issued for %s, expires at %s", mobile_number, otp.expires_at.isoformat())
        return otp

    @staticmethod
    @transaction.atomic
    def verify(*, mobile_number: str, code: str) -> Optional[OTP]:
        otp = (
            OTP.objects.select_for_update()
            .filter(
                mobile_number=mobile_number,
                code=code,
                is_used=False,
                expires_at__gt=timezone.now(),
            )
            .order_by("-created_at")
            .first()
        )
        if not otp:
            return None
        otp.is_used = True
        otp.save(update_fields=["is_used"])
        return otp

    @staticmethod
    def purge_expired(now=None) -> int:
        deleted, _ = OTP.objects.filter(expires_at__lte=now or timezone.now()).delete()
        return deleted
