from django.urls import path

from .views import AdminPanelView

app_name = "adminpanel"

urlpatterns = [
    path("", AdminPanelView.as_view(), name="home"),
    path("<path:path>", AdminPanelView.as_view(), name="page"),
]
