# apps/common/urls.py

from django.urls import path
from apps.common.views import LookupView, ResourceMonitorView

urlpatterns = [
    path('monitor/resources/', ResourceMonitorView.as_view(), name='monitor_resources'),
    path('<slug:name>/', LookupView.as_view(), name='lookup'),
]
