"""
URL Configuration for the Newsroom dashboard shell

Maps the Arabic, Urdu and publisher dashboards, sidebar toggling, login and
logout. Section pages are catch-all so every nav path renders inside its
shell.
"""

from django.urls import path, re_path

from . import views
from .layouts import URDU_LAYOUT

urlpatterns = [
    # Authentication
    path('login', views.NewsroomLoginView.as_view(), name='login'),
    path('ur/login', views.NewsroomLoginView.as_view(layout=URDU_LAYOUT), name='urdu_login'),
    path('logout/<str:layout_name>/', views.logout_view, name='logout'),

    # Sidebar
    path('sidebar/<str:layout_name>/<str:group_id>/toggle/', views.toggle_sidebar_group, name='toggle_sidebar_group'),
    path('nav/click/', views.nav_click, name='nav_click'),

    # Publisher portal (before the catch-all dashboard section)
    re_path(r'^dashboard/publisher/?$', views.publisher_home, name='publisher_home'),
    path('dashboard/publisher/<path:section>', views.publisher_section, name='publisher_section'),

    # Notifications
    re_path(r'^dashboard/notifications/?$', views.notifications_page, name='notifications_page'),
    path('dashboard/notifications/read-all/', views.mark_all_notifications_read, name='mark_all_notifications_read'),

    # Arabic dashboard
    re_path(r'^dashboard/?$', views.dashboard_home, name='dashboard'),
    path('dashboard/<path:section>', views.dashboard_section, name='dashboard_section'),

    # Urdu dashboard
    re_path(r'^ur/dashboard/?$', views.urdu_home, name='urdu_dashboard'),
    path('ur/dashboard/<path:section>', views.urdu_section, name='urdu_section'),
]
