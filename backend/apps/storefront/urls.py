from django.urls import path

from .views import StorefrontView

app_name = "storefront"

urlpatterns = [
    path("", StorefrontView.as_view(), name="home"),
    path("<path:path>", StorefrontView.as_view(), name="page"),
]
