from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # username, password, is_staff, is_superuser, groups, permissions are inherited.
    # Signup uses the email as the username.
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=150, blank=True, default="")

    @property
    def display_name(self) -> str:
        return self.full_name.strip() or self.email

    def __str__(self):
        return self.email or self.username
