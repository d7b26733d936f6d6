import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("brand", models.CharField(blank=True, default="", max_length=120)),
                ("category", models.CharField(db_index=True, max_length=120)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("rating", models.DecimalField(decimal_places=1, default=0, max_digits=2)),
                ("description", models.TextField(blank=True, default="")),
                ("images", models.JSONField(blank=True, default=list)),
                ("features", models.JSONField(blank=True, default=list)),
                ("warranty", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "products",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["name"], name="product_name_idx"),
                    models.Index(fields=["brand"], name="product_brand_idx"),
                    models.Index(fields=["-created_at"], name="product_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Slide",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("button_text", models.CharField(blank=True, default="", max_length=80)),
                ("button_link", models.CharField(blank=True, default="", max_length=500)),
                ("image_url_desktop", models.URLField(blank=True, default="", max_length=1000)),
                ("image_url_mobile", models.URLField(blank=True, default="", max_length=1000)),
                ("thumbnail_url", models.URLField(blank=True, default="", max_length=1000)),
                ("show_overlay", models.BooleanField(default=True)),
                ("fit_desktop", models.CharField(choices=[("cover", "Cover"), ("contain", "Contain")], default="cover", max_length=10)),
                ("fit_mobile", models.CharField(choices=[("cover", "Cover"), ("contain", "Contain")], default="cover", max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "slides",
                "ordering": ["created_at"],
            },
        ),
    ]
