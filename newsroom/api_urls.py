"""
API URL Configuration for the Newsroom application

Maps API endpoints to views; users go through a DRF router, tokens through
simplejwt.
"""

from django.urls import include, path, re_path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .api_views import (
    AnnouncementStateView,
    LogoutView,
    NavStateView,
    SidebarStateView,
    UserViewSet,
)

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')

urlpatterns = [
    path('nav/<str:layout_name>/', NavStateView.as_view(), name='api_nav_state'),
    path('sidebar-state/<str:layout_name>/', SidebarStateView.as_view(), name='api_sidebar_state'),
    path('announcements/<str:announcement_id>/', AnnouncementStateView.as_view(), name='api_announcement'),
    path(
        'announcements/<str:announcement_id>/<str:operation>/',
        AnnouncementStateView.as_view(),
        name='api_announcement_operation',
    ),
    re_path(r'^logout/?$', LogoutView.as_view(), name='api_logout'),
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('', include(router.urls)),
]
