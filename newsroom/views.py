"""
Views for the Newsroom dashboard shell

This module contains view functions for:
- Dashboard pages of each shell (home + section pages)
- The notifications page (read from the REST API)
- Sidebar group toggling (persisted per shell)
- Logout with a localized toast
- Login pages for the Arabic and Urdu shells
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.views import LoginView
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .api_client import NewsroomApiClient
from .exceptions import AuthenticationRequired, MutationFailed
from .layouts import (
    DASHBOARD_LAYOUT,
    PUBLISHER_LAYOUT,
    URDU_LAYOUT,
    get_layout,
    layout_view,
    sidebar_state_for,
)
from .navigation.resolver import track_nav_click

logger = logging.getLogger(__name__)


# ===== DASHBOARD PAGES =====

@layout_view(DASHBOARD_LAYOUT)
def dashboard_home(request):
    """Arabic dashboard landing page."""
    return {'section': None}


@layout_view(DASHBOARD_LAYOUT)
def dashboard_section(request, section):
    """
    Any page below /dashboard/.

    The page body itself is served by the section's own frontend; the shell
    only renders sidebar, breadcrumbs and header around it.
    """
    return {'section': section}


@layout_view(URDU_LAYOUT)
def urdu_home(request):
    return {'section': None}


@layout_view(URDU_LAYOUT)
def urdu_section(request, section):
    return {'section': section}


@layout_view(PUBLISHER_LAYOUT)
def publisher_home(request):
    return {'section': None}


@layout_view(PUBLISHER_LAYOUT)
def publisher_section(request, section):
    return {'section': section}


@layout_view(DASHBOARD_LAYOUT, template_name='newsroom/notifications.html')
def notifications_page(request):
    """
    Notifications list read from the REST API.

    A failing API call renders the empty state; an expired session sends
    the user back to the login page.
    """
    client = NewsroomApiClient.for_request(request)
    try:
        notifications = client.fetch_notifications(limit=50, language=DASHBOARD_LAYOUT.language)
    except AuthenticationRequired:
        return redirect(DASHBOARD_LAYOUT.login_url)
    return {'section': 'notifications', 'notifications': notifications}


@require_POST
def mark_all_notifications_read(request):
    """
    Mark every notification as read, then go back to the notifications page.

    Failures become an error toast; nothing the user typed is lost because
    there is no form state on this page.
    """
    if not request.user.is_authenticated:
        return redirect(DASHBOARD_LAYOUT.login_url)

    client = NewsroomApiClient.for_request(request)
    try:
        client.mark_all_notifications_read()
        messages.success(request, 'تم تعليم جميع الإشعارات كمقروءة')
    except AuthenticationRequired:
        return redirect(DASHBOARD_LAYOUT.login_url)
    except MutationFailed as e:
        logger.warning(f"Mark-all-read failed for {request.user.username}: {e}")
        messages.error(request, e.user_message)

    return redirect('notifications_page')


# ===== SIDEBAR =====

def _safe_next(request, fallback):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return fallback


@require_POST
def toggle_sidebar_group(request, layout_name, group_id):
    """
    Flip the collapsed state of one sidebar group.

    Args:
        request: HTTP request object
        layout_name: Shell name (dashboard / urdu / publisher)
        group_id: Id of the group heading

    Returns:
        Redirect back to the page the toggle was clicked on
    """
    layout = get_layout(layout_name)
    if not request.user.is_authenticated:
        return redirect_to_layout_login(layout)

    state = sidebar_state_for(request, layout).toggle(group_id)
    logger.debug(f"Sidebar group {group_id} on {layout.name} collapsed={state.get(group_id)}")
    return redirect(_safe_next(request, layout.home_url))


@require_POST
def nav_click(request):
    """Record a sidebar click then follow it."""
    item_id = request.POST.get('item_id', '')
    path = request.POST.get('path') or '/'
    if not url_has_allowed_host_and_scheme(path, allowed_hosts={request.get_host()}):
        path = '/'
    track_nav_click(item_id, path, request.user)
    return redirect(path)


# ===== AUTHENTICATION =====

def redirect_to_layout_login(layout):
    return redirect(layout.login_url)


@require_POST
def logout_view(request, layout_name='dashboard'):
    """
    End the session and show the shell's goodbye toast on the login page.

    Args:
        request: HTTP request object
        layout_name: Shell the user logged out from

    Returns:
        Redirect to the shell's login route
    """
    layout = get_layout(layout_name)
    username = getattr(request.user, 'username', '')

    if settings.NEWSROOM_API_BASE_URL:
        try:
            NewsroomApiClient.for_request(request).logout()
        except (AuthenticationRequired, MutationFailed) as e:
            logger.warning(f"Remote logout failed for {username}: {e}")

    logout(request)
    # The session was flushed; the toast goes into the fresh one
    messages.success(request, f"{layout.logout_message['title']} - {layout.logout_message['description']}")
    logger.info(f"User {username or 'anonymous'} logged out from {layout.name}")

    return redirect(layout.login_url)


class NewsroomLoginView(LoginView):
    """Login page, rendered right-to-left for Arabic and Urdu."""

    template_name = 'registration/login.html'
    redirect_authenticated_user = True
    layout = DASHBOARD_LAYOUT

    def get_default_redirect_url(self):
        return self.layout.home_url

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['language'] = self.layout.language
        context['direction'] = 'rtl'
        return context
