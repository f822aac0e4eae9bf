# apps/members/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import FirebaseLoginView, LoginView, ProfileView, RegisterView, VerifyView

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("firebase-login/", FirebaseLoginView.as_view(), name="firebase_login"),
    path("verify/", VerifyView.as_view(), name="verify"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
]
