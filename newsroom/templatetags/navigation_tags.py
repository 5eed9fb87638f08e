"""Navigation template helpers: breadcrumbs, localized labels and icons."""

from django import template

from newsroom.navigation.breadcrumbs import build_breadcrumbs, detect_language, text_direction

register = template.Library()

BREADCRUMB_ARIA_LABELS = {
    'ar': 'مسار التنقل',
    'en': 'Breadcrumb',
    'ur': 'بریڈ کرمب',
}


@register.inclusion_tag('newsroom/includes/breadcrumbs.html', takes_context=True)
def nav_breadcrumbs(context, state=None, pathname=None):
    """
    Render the breadcrumb trail for a resolved navigation state.

    Defaults to ``nav_state`` from the context and the current request path.
    Renders nothing when no item is active.
    """
    state = state if state is not None else context.get('nav_state')
    if pathname is None:
        request = context.get('request')
        pathname = request.path if request is not None else '/'

    language = detect_language(pathname)
    return {
        'crumbs': build_breadcrumbs(state, pathname),
        'aria_label': BREADCRUMB_ARIA_LABELS[language],
        'direction': text_direction(language),
    }


@register.filter
def nav_label(item, language='ar'):
    """Label of a NavItem in the given language."""
    return item.label(language)


@register.filter
def nav_icon(icon):
    """CSS class for a symbolic icon name."""
    if not icon:
        return ''
    return f"icon icon-{icon}"


@register.simple_tag
def is_active_item(item, active_item):
    """True if ``item`` is the active item or one of its ancestors."""
    if active_item is None:
        return False
    if item.id == active_item.id:
        return True
    return any(is_active_item(child, active_item) for child in item.children)
