from django.urls import path

from .views import MediaHistoryView, MediaUploadView, MediaUpscaleView, SystemConfigView

admin_urlpatterns = [
    path("media/upload/", MediaUploadView.as_view(), name="admin-media-upload"),
    path("media/upscale/", MediaUpscaleView.as_view(), name="admin-media-upscale"),
    path("media/history/", MediaHistoryView.as_view(), name="admin-media-history"),
    path("config/", SystemConfigView.as_view(), name="admin-system-config"),
]
