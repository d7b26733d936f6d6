from django.urls import path

from .views import (
    AdminLoginView,
    LoginView,
    LogoutView,
    RefreshView,
    SessionView,
    SignupView,
)

urlpatterns = [
    path("signup/", SignupView.as_view(), name="auth-signup"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("login/admin/", AdminLoginView.as_view(), name="auth-admin-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("session/", SessionView.as_view(), name="auth-session"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
]
