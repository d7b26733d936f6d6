from django.db import models
from django.utils import timezone


class Product(models.Model):
    name = models.CharField(max_length=255)
    brand = models.CharField(max_length=120, blank=True, default="")
    category = models.CharField(max_length=120, db_index=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    description = models.TextField(blank=True, default="")
    # First entry is the main image, the rest form the gallery.
    images = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    warranty = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["brand"], name="product_brand_idx"),
            models.Index(fields=["-created_at"], name="product_created_idx"),
        ]

    def __str__(self):
        return self.name


class Slide(models.Model):
    FIT_CHOICES = [("cover", "Cover"), ("contain", "Contain")]

    title = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    button_text = models.CharField(max_length=80, blank=True, default="")
    button_link = models.CharField(max_length=500, blank=True, default="")
    image_url_desktop = models.URLField(max_length=1000, blank=True, default="")
    image_url_mobile = models.URLField(max_length=1000, blank=True, default="")
    thumbnail_url = models.URLField(max_length=1000, blank=True, default="")
    show_overlay = models.BooleanField(default=True)
    fit_desktop = models.CharField(max_length=10, choices=FIT_CHOICES, default="cover")
    fit_mobile = models.CharField(max_length=10, choices=FIT_CHOICES, default="cover")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "slides"
        ordering = ["created_at"]

    def __str__(self):
        return self.title or f"Slide {self.pk}"
