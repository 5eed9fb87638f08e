"""
Navigation item model.

A navigation tree is a tuple of NavItem objects. Items are immutable and
language agnostic: every item carries its Arabic, English and Urdu labels
and a symbolic icon name, and nothing in here knows how it is rendered.

Conventions:
- ``id`` is unique across the whole tree, nested children included
- A divider starts a new sidebar group and is never navigable
- ``required_role`` is either a single canonical role or a tuple of roles
- ``exact`` items only become active on an exact pathname match
"""
from dataclasses import dataclass, field, replace

from ..exceptions import NavConfigurationError


@dataclass(frozen=True)
class NavItem:
    id: str
    label_key: str
    label_ar: str = ''
    label_en: str = ''
    label_ur: str = ''
    path: str = None
    icon: str = None  # symbolic icon name, e.g. "file-text"
    required_role: object = None
    required_flag: str = None
    divider: bool = False
    children: tuple = field(default_factory=tuple)
    permissions: tuple = field(default_factory=tuple)
    exact: bool = False

    def label(self, language='ar'):
        """
        Label for the given language.

        Blank labels fall back to English and then to Arabic so a
        half-translated tree still renders something readable.
        """
        if language == 'ur' and self.label_ur:
            return self.label_ur
        if language == 'en' and self.label_en:
            return self.label_en
        if language == 'ar' and self.label_ar:
            return self.label_ar
        return self.label_en or self.label_ar or self.label_key

    def allows_role(self, role):
        if self.required_role is None:
            return True
        if isinstance(self.required_role, (tuple, list, set, frozenset)):
            return role in self.required_role
        return role == self.required_role

    def with_children(self, children):
        """Copy of this item with a different children tuple."""
        return replace(self, children=tuple(children))


def divider(item_id, label_key, label_ar='', label_en='', label_ur='', required_role=None):
    """Shortcut for a group heading."""
    return NavItem(
        id=item_id,
        label_key=label_key,
        label_ar=label_ar,
        label_en=label_en,
        label_ur=label_ur,
        required_role=required_role,
        divider=True,
    )


def iter_items(items):
    """Depth-first, declaration-order walk over a tree."""
    for item in items:
        yield item
        yield from iter_items(item.children)


def validate_tree(items):
    """
    Check the structural invariants of a static tree.

    Args:
        items: Iterable of NavItem objects (the tree roots)

    Returns:
        The tree as a tuple, so it can be used inline at module level

    Raises:
        NavConfigurationError: If an id repeats or a divider is navigable
    """
    items = tuple(items)
    seen = set()
    for item in iter_items(items):
        if item.id in seen:
            raise NavConfigurationError(
                f"Duplicate navigation id '{item.id}'",
                details={'id': item.id},
            )
        seen.add(item.id)

        if item.divider and (item.path or item.children):
            raise NavConfigurationError(
                f"Divider '{item.id}' cannot have a path or children",
                details={'id': item.id},
            )
    return items
