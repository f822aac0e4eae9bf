# arena_core/urls.py

from django.contrib import admin
from django.urls import path, include
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Arena API",
        default_version='v1',
        description="Venue booking, shop, courses and teams",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
    authentication_classes=[],
)

urlpatterns = [
    path('api/schema/', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    path('docs/', schema_view.with_ui('swagger', cache_timeout=0), name='swagger-ui'),
    path('admin/', admin.site.urls),

    # Apps
    path('api/auth/', include('apps.members.urls')),
    path('api/admin/', include('apps.members.admin_urls')),
    path('api/common/', include('apps.common.urls')),
    path('api/venue/', include('apps.venue.urls')),
    path('api/course/', include('apps.course.urls')),
    path('api/shop/', include('apps.shop.urls')),
    path('api/team/', include('apps.team.urls')),
]
