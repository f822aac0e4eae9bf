# apps/team/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    CalendarMarkDetailView,
    CalendarMarkView,
    JoinRequestDetailView,
    JoinRequestView,
    LevelListView,
    MessageView,
    TeamCentersView,
    TeamMemberKickView,
    TeamViewSet,
)

router = DefaultRouter()
router.register(r'teams', TeamViewSet, basename='teams')

urlpatterns = [
    path("levels/", LevelListView.as_view(), name="team_levels"),
    path("centers/", TeamCentersView.as_view(), name="team_centers"),
    path("join-requests/", JoinRequestView.as_view(), name="team_join_requests"),
    path("join-requests/<int:pk>/", JoinRequestDetailView.as_view(), name="team_join_request_detail"),
    path("members/<int:team_id>/<int:member_id>/", TeamMemberKickView.as_view(), name="team_member_kick"),
    path("calendar-marks/", CalendarMarkView.as_view(), name="team_calendar_marks"),
    path("calendar-marks/<int:pk>/", CalendarMarkDetailView.as_view(), name="team_calendar_mark_detail"),
    path("messages/", MessageView.as_view(), name="team_messages"),
    path("", include(router.urls)),
]
