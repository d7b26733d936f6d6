from django.urls import include, path

from apps.catalog.urls import admin_urlpatterns as catalog_admin_urlpatterns
from apps.media.urls import admin_urlpatterns as media_admin_urlpatterns

urlpatterns = [
    path("", include("apps.catalog.urls")),
    path("", include("apps.carts.urls")),
    path("auth/", include("apps.auth.urls")),
    path("users/", include("apps.users.urls")),
    path("admin/", include(catalog_admin_urlpatterns + media_admin_urlpatterns)),
]
