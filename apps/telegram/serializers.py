from rest_framework import serializers


class TelegramUsernameSerializer(serializers.Serializer):
    """An empty value or null unlinks the account from Telegram."""

    telegram_username = serializers.CharField(max_length=64, allow_blank=True, allow_null=True)

    def validate_telegram_username(self, value):
        value = (value or "").strip().lstrip("@")
        if not value:
            return None
        if not 3 <= len(value) <= 32:
            raise serializers.ValidationError("Telegram username must be between 3 and 32 characters")
        if not all(ch.isascii() and (ch.isalnum() or ch == "_") for ch in value):
            raise serializers.ValidationError(
                "Telegram username can only contain letters, numbers, and underscores"
            )
        return value
