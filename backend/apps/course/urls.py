# apps/course/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BookingViewSet, LessonViewSet

router = DefaultRouter()
router.register(r'lessons', LessonViewSet, basename='lessons')
router.register(r'bookings', BookingViewSet, basename='bookings')

urlpatterns = [
    path("", include(router.urls)),
]
