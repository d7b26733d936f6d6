from django.db import models
from django.utils import timezone


class SystemConfig(models.Model):
    key = models.CharField(max_length=120, unique=True)
    value = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "system_config"
        ordering = ["key"]

    def __str__(self):
        return self.key


class MediaHistory(models.Model):
    UPLOAD = "upload"
    UPSCALE = "upscale"
    TYPE_CHOICES = [(UPLOAD, "Upload"), (UPSCALE, "Upscale")]

    file_name = models.CharField(max_length=255)
    file_url = models.URLField(max_length=1024)
    media_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    admin_email = models.CharField(max_length=254, default="unknown")
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "media_history"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.media_type}: {self.file_name}"
