"""
Layout shells.

Each dashboard variant (Arabic dashboard, Urdu dashboard, publisher portal)
is one LayoutShell: a navigation tree, the storage key its sidebar state
lives under, its language and the login route it falls back to.

This module holds:
- The three shell definitions and a lookup by name
- Sidebar grouping (dividers start new groups)
- The template context shared by every page rendered inside a shell
- The ``layout_view`` decorator (auth gate + shell rendering)
"""
import logging
from dataclasses import dataclass, field
from functools import wraps

from django.contrib.auth.views import redirect_to_login
from django.http import Http404
from django.shortcuts import render

from . import roles
from .navigation.breadcrumbs import build_breadcrumbs, text_direction
from .navigation.config import DASHBOARD_NAV, PUBLISHER_NAV, URDU_NAV, get_feature_flags
from .navigation.resolver import resolve_nav
from .storage import SessionStorage, SidebarState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutShell:
    name: str
    nav_tree: tuple
    storage_key: str
    language: str
    login_url: str
    home_url: str
    logout_message: dict = field(default_factory=dict)
    template_name: str = 'newsroom/layouts/shell.html'


DASHBOARD_LAYOUT = LayoutShell(
    name='dashboard',
    nav_tree=DASHBOARD_NAV,
    storage_key='sabq.sidebar.v1',
    language='ar',
    login_url='/login',
    home_url='/dashboard',
    logout_message={'title': 'تم تسجيل الخروج', 'description': 'نراك قريباً'},
)

URDU_LAYOUT = LayoutShell(
    name='urdu',
    nav_tree=URDU_NAV,
    storage_key='sabq.sidebar.urdu.v1',
    language='ur',
    login_url='/ur/login',
    home_url='/ur/dashboard',
    logout_message={'title': 'لاگ آؤٹ ہو گیا', 'description': 'جلد ملتے ہیں'},
)

PUBLISHER_LAYOUT = LayoutShell(
    name='publisher',
    nav_tree=PUBLISHER_NAV,
    storage_key='sabq.sidebar.publisher.v1',
    language='ar',
    login_url='/login',
    home_url='/dashboard/publisher',
    logout_message={'title': 'تم تسجيل الخروج', 'description': 'نراك قريباً'},
)

LAYOUTS = {
    layout.name: layout
    for layout in (DASHBOARD_LAYOUT, URDU_LAYOUT, PUBLISHER_LAYOUT)
}


def get_layout(name):
    """Look up a shell by name, raising Http404 for unknown names."""
    try:
        return LAYOUTS[name]
    except KeyError:
        raise Http404(f"Unknown layout '{name}'")


# ===== SIDEBAR GROUPS =====

def group_nav_items(tree_filtered):
    """
    Split a filtered tree into sidebar groups.

    Contiguous non-divider items form a group. Each divider starts a new
    group and becomes its heading. Groups without a single navigable item
    (e.g. a divider whose section was filtered away) are dropped.

    Returns:
        List of dicts with ``id``, ``heading`` (NavItem or None) and ``items``
    """
    groups = []
    current = {'id': 'group-0', 'heading': None, 'items': []}

    for item in tree_filtered:
        if item.divider:
            groups.append(current)
            current = {'id': item.id, 'heading': item, 'items': []}
        else:
            current['items'].append(item)
    groups.append(current)

    return [group for group in groups if group['items']]


def sidebar_state_for(request, layout):
    return SidebarState(SessionStorage(request.session), layout.storage_key)


# ===== CONTEXT =====

def build_layout_context(request, layout):
    """
    Everything the shell template needs for the current request.

    Args:
        request: HTTP request object with an authenticated user
        layout: LayoutShell

    Returns:
        Dictionary of template context
    """
    user = request.user
    raw_role = getattr(user, 'role', None)
    permissions = roles.permissions_for_roles([raw_role])

    nav_state = resolve_nav(
        layout.nav_tree,
        raw_role,
        flags=get_feature_flags(),
        pathname=request.path,
        permissions=permissions,
    )

    collapsed = sidebar_state_for(request, layout).load()
    groups = group_nav_items(nav_state.tree_filtered)
    for group in groups:
        group['collapsed'] = collapsed.get(group['id'], False)

    return {
        'layout': layout,
        'language': layout.language,
        'direction': text_direction(layout.language),
        'canonical_role': roles.map_role(raw_role),
        'role_label': roles.role_label(raw_role, layout.language),
        'nav_state': nav_state,
        'active_item': nav_state.active_item,
        'sidebar_groups': groups,
        'breadcrumbs': build_breadcrumbs(nav_state, request.path),
    }


def layout_view(layout, template_name=None):
    """
    Render a view inside a layout shell.

    Anonymous users are sent to the shell's login route with ``next`` set.
    The wrapped view may return an HttpResponse (passed through untouched)
    or a dict of extra context for the shell template.

    Usage:
        @layout_view(URDU_LAYOUT)
        def urdu_home(request):
            return {'title': '...'}
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                logger.info(f"Anonymous access to {request.path}, redirecting to {layout.login_url}")
                return redirect_to_login(request.get_full_path(), layout.login_url)

            result = view_func(request, *args, **kwargs)
            if not isinstance(result, dict):
                return result

            context = build_layout_context(request, layout)
            context.update(result)
            return render(request, template_name or layout.template_name, context)
        return wrapper
    return decorator
