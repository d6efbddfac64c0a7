from django.contrib.auth.models import UserManager as DjangoUserManager


class UserManager(DjangoUserManager):

    def create_user(self, username, email=None, password=None, **extra_fields):
        if extra_fields.get("telegram_username") == "":
            extra_fields["telegram_username"] = None
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields["role"] = self.model.Role.ADMIN

        return super().create_superuser(username, email, password, **extra_fields)
