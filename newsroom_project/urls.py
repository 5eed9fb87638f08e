"""
URL configuration for newsroom_project.

- /admin/ Django admin
- /api/   REST API (navigation, sidebar state, announcements, users, auth)
- /       dashboard shells
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('newsroom.api_urls')),
    path('', include('newsroom.urls')),
]
