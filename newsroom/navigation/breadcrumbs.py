"""
Breadcrumb trail built from a resolved navigation state.

The trail is Home + ancestors + active item, localized by the language
prefix of the current path.
"""
from dataclasses import dataclass

from .resolver import normalize_pathname

HOME_LABELS = {
    'ar': 'الرئيسية',
    'en': 'Home',
    'ur': 'ہوم',
}

HOME_PATHS = {
    'ar': '/dashboard',
    'en': '/en/dashboard',
    'ur': '/ur/dashboard',
}

RTL_LANGUAGES = ('ar', 'ur')


@dataclass(frozen=True)
class Crumb:
    label: str
    href: str = None
    is_current: bool = False


def detect_language(pathname):
    """``/ur/...`` is Urdu, ``/en/...`` is English, everything else Arabic."""
    pathname = normalize_pathname(pathname) or '/'
    if pathname == '/ur' or pathname.startswith('/ur/'):
        return 'ur'
    if pathname == '/en' or pathname.startswith('/en/'):
        return 'en'
    return 'ar'


def text_direction(language):
    return 'rtl' if language in RTL_LANGUAGES else 'ltr'


def build_breadcrumbs(state, pathname):
    """
    Build the breadcrumb trail for a resolved state.

    Args:
        state: ResolvedNavState
        pathname: Current request path, used only for the language prefix

    Returns:
        List of Crumb objects; empty when nothing is active
    """
    if state is None or state.active_item is None:
        return []

    language = detect_language(pathname)
    home_path = HOME_PATHS[language]

    crumbs = [Crumb(label=HOME_LABELS[language], href=home_path)]
    for parent in state.parents:
        crumbs.append(Crumb(label=parent.label(language), href=parent.path or home_path))
    crumbs.append(Crumb(label=state.active_item.label(language), is_current=True))
    return crumbs
