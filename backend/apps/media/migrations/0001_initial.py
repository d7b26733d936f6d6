import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SystemConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=120, unique=True)),
                ("value", models.TextField(blank=True, default="")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "system_config", "ordering": ["key"]},
        ),
        migrations.CreateModel(
            name="MediaHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file_name", models.CharField(max_length=255)),
                ("file_url", models.URLField(max_length=1024)),
                (
                    "media_type",
                    models.CharField(choices=[("upload", "Upload"), ("upscale", "Upscale")], max_length=16),
                ),
                ("admin_email", models.CharField(default="unknown", max_length=254)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={"db_table": "media_history", "ordering": ["-created_at", "-id"]},
        ),
    ]
