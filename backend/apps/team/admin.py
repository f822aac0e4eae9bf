# apps/team/admin.py
from django.contrib import admin

from apps.team.models import Level, PracticeSchedule, Team, TeamJoinRequest, TeamMember

admin.site.register(Level)


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0
    raw_id_fields = ("member",)


class PracticeScheduleInline(admin.TabularInline):
    model = PracticeSchedule
    extra = 0


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "level", "court", "is_featured", "created_at")
    list_filter = ("level", "is_featured")
    search_fields = ("name",)
    inlines = [TeamMemberInline, PracticeScheduleInline]


@admin.register(TeamJoinRequest)
class TeamJoinRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "team", "member", "status", "created_at")
    list_filter = ("status",)
