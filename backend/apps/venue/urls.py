# apps/venue/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CenterViewSet, CourtTimeSlotViewSet, CourtViewSet, ReservationViewSet, TimeSlotViewSet

router = DefaultRouter()
router.register(r'centers', CenterViewSet, basename='centers')
router.register(r'courts', CourtViewSet, basename='courts')
router.register(r'time-slots', TimeSlotViewSet, basename='time-slots')
router.register(r'court-time-slots', CourtTimeSlotViewSet, basename='court-time-slots')
router.register(r'reservations', ReservationViewSet, basename='reservations')

urlpatterns = [
    path("", include(router.urls)),
]
