from django.db.models import Count, Q

from apps.common.repository import GenericRepository
from .models import Product, Slide


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def list_by_ids(self, ids):
        return self.model.objects.filter(id__in=list(ids))

    def list_by_category(self, category: str, brand=None):
        qs = self.model.objects.filter(category__iexact=category)
        if brand:
            qs = qs.filter(brand__iexact=brand)
        return qs

    def search(self, query: str):
        return self.model.objects.filter(
            Q(name__icontains=query) | Q(brand__icontains=query) | Q(category__icontains=query)
        )

    def latest(self, limit: int):
        return self.model.objects.order_by("-created_at", "-id")[:limit]

    def category_counts(self):
        rows = (
            self.model.objects.values("category")
            .annotate(total=Count("id"))
            .order_by("-total", "category")
        )
        return [(row["category"], row["total"]) for row in rows]


class SlideRepository(GenericRepository[Slide]):
    def __init__(self):
        super().__init__(Slide)

    def list(self, **filters):
        return self.model.objects.filter(**filters).order_by("created_at", "id")

    def list_active(self):
        return self.list(is_active=True)
