"""
Cells URLs - API routing.

URL Namespace:
- API: api:v1:cells:resource-name
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views_api


# =============================================================================
# API ROUTER (DRF ViewSets)
# =============================================================================

api_router = DefaultRouter()

api_router.register(
    r'groups',
    views_api.CellGroupViewSet,
    basename='cell-group'
)

api_router.register(
    r'reports',
    views_api.WeeklyReportViewSet,
    basename='report'
)

api_router.register(
    r'visitors',
    views_api.VisitorViewSet,
    basename='visitor'
)

api_router.register(
    r'analytics',
    views_api.AnalyticsViewSet,
    basename='analytics'
)


# =============================================================================
# API URLPATTERNS
# =============================================================================

api_urlpatterns = [
    path('', include(api_router.urls)),
]
