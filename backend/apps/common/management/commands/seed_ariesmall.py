import os
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.carts.models import CartItem, WishlistItem
from apps.catalog.models import Product, Slide
from apps.media.config import KNOWN_KEYS
from apps.media.models import SystemConfig
from apps.users.models import User

PRODUCTS = [
    {
        "name": "Luxury Leather Sofa",
        "brand": "Comfy",
        "category": "Furniture",
        "price": "1200.00",
        "rating": "4.8",
        "description": "Three-seater in full-grain leather with a solid hardwood frame.",
        "images": [
            "https://res.cloudinary.com/ariesmall/image/upload/v1/products/sofa.jpg",
            "https://res.cloudinary.com/ariesmall/image/upload/v1/products/sofa-side.jpg",
        ],
        "features": ["Full-grain leather", "Hardwood frame", "Seats three"],
        "warranty": "5 years",
    },
    {
        "name": "Oak Dining Table",
        "brand": "",
        "category": "Furniture",
        "price": "850.00",
        "rating": "4.4",
        "description": "Six-seat dining table in solid oak.",
        "images": ["https://res.cloudinary.com/ariesmall/image/upload/v1/products/oak-table.jpg"],
        "features": ["Solid oak", "Seats six"],
        "warranty": "2 years",
    },
    {
        "name": "Noise Cancelling Headphones",
        "brand": "Sonic",
        "category": "Electronics",
        "price": "2999.00",
        "rating": "4.6",
        "description": "Over-ear headphones with adaptive noise cancelling and 30 hour battery life.",
        "images": ["https://res.cloudinary.com/ariesmall/image/upload/v1/products/headphones.jpg"],
        "features": ["Adaptive ANC", "30 hour battery", "USB-C fast charge"],
        "warranty": "1 year",
    },
    {
        "name": "Smart Watch",
        "brand": "Pulse",
        "category": "Electronics",
        "price": "4999.00",
        "rating": "4.2",
        "description": "Fitness tracking, heart-rate monitoring and notifications on your wrist.",
        "images": ["https://res.cloudinary.com/ariesmall/image/upload/v1/products/watch.jpg"],
        "features": ["Heart-rate monitor", "GPS", "Water resistant"],
        "warranty": "1 year",
    },
    {
        "name": "Bluetooth Speaker",
        "brand": "Sonic",
        "category": "Electronics",
        "price": "1499.00",
        "rating": "4.1",
        "description": "Portable speaker with deep bass and a splash-proof body.",
        "images": ["https://res.cloudinary.com/ariesmall/image/upload/v1/products/speaker.jpg"],
        "features": ["12 hour battery", "Splash-proof"],
        "warranty": "1 year",
    },
    {
        "name": "Stainless Steel Refrigerator",
        "brand": "Frost",
        "category": "Home Appliances",
        "price": "32999.00",
        "rating": "4.5",
        "description": "Double-door frost-free refrigerator with an inverter compressor.",
        "images": ["https://res.cloudinary.com/ariesmall/image/upload/v1/products/fridge.jpg"],
        "features": ["Frost-free", "Inverter compressor", "340 L"],
        "warranty": "10 years on compressor",
    },
]

SLIDES = [
    {
        "title": "The Living Room Edit",
        "description": "Sofas, tables and more for the heart of your home.",
        "button_text": "Shop Furniture",
        "button_link": "#/category/furniture",
        "image_url_desktop": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/living-desktop.jpg",
        "image_url_mobile": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/living-mobile.jpg",
        "thumbnail_url": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/living-thumb.jpg",
        "show_overlay": True,
        "is_active": True,
    },
    {
        "title": "Sound That Moves You",
        "description": "Headphones and speakers from Sonic.",
        "button_text": "Shop Electronics",
        "button_link": "#/category/electronics",
        "image_url_desktop": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/audio-desktop.jpg",
        "image_url_mobile": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/audio-mobile.jpg",
        "thumbnail_url": "https://res.cloudinary.com/ariesmall/image/upload/v1/slides/audio-thumb.jpg",
        "show_overlay": False,
        "fit_mobile": "contain",
        "is_active": True,
    },
]


class Command(BaseCommand):
    help = "Seed the AriesMall catalog, hero slides, media settings and the admin account."

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing data before seeding")
        parser.add_argument(
            "--admin-password",
            default=os.getenv("ADMIN_PASSWORD", "change-me-now"),
            help="Password for the admin account (default: $ADMIN_PASSWORD)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            CartItem.objects.all().delete()
            WishlistItem.objects.all().delete()
            Product.objects.all().delete()
            Slide.objects.all().delete()

        self.stdout.write("Seeding products...")
        # Staggered timestamps give the dashboard a stable "latest products" order.
        now = timezone.now()
        for offset, payload in enumerate(PRODUCTS):
            data = dict(payload, price=Decimal(payload["price"]), rating=Decimal(payload["rating"]))
            Product.objects.update_or_create(
                name=data.pop("name"),
                defaults={**data, "created_at": now - timedelta(minutes=len(PRODUCTS) - offset)},
            )

        self.stdout.write("Seeding slides...")
        for payload in SLIDES:
            data = dict(payload)
            Slide.objects.update_or_create(title=data.pop("title"), defaults=data)

        self.stdout.write("Seeding media settings...")
        for key in KNOWN_KEYS:
            SystemConfig.objects.get_or_create(key=key, defaults={"value": os.getenv(key, "")})

        self.stdout.write("Ensuring admin account...")
        email = settings.ADMIN_EMAIL.lower()
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "full_name": "Aries Mall Admin", "is_staff": True},
        )
        if created or options["flush"]:
            user.set_password(options["admin_password"])
        user.is_staff = True
        user.save()

        self.stdout.write(self.style.SUCCESS("AriesMall seed completed."))
