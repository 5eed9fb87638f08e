"""
Navigation resolver.

Given a static tree, the viewer's role, feature flags, the current
pathname and (optionally) fine-grained permission codes, produce:

- The filtered tree the sidebar renders
- The active item matching the pathname
- The ancestor chain of the active item (breadcrumb trail)

The resolver is pure and never raises: bad input degrades to guest-level
visibility and no active item.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .. import roles
from .items import iter_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedNavState:
    tree_filtered: tuple = field(default_factory=tuple)
    active_item: object = None
    parents: tuple = field(default_factory=tuple)


def normalize_pathname(pathname):
    """
    Normalize a pathname for matching.

    Drops the query string and fragment and any trailing slash, so that
    ``/dashboard/articles/?page=2`` and ``/dashboard/articles`` are the same
    location. Returns None for anything that is not a string.
    """
    if not isinstance(pathname, str):
        return None
    normalized = pathname.strip().split('?', 1)[0].split('#', 1)[0]
    if not normalized.startswith('/'):
        normalized = f"/{normalized}"
    normalized = normalized.rstrip('/')
    return normalized or '/'


# ===== FILTERING =====

def _passes_flags(item, flags):
    if not item.required_flag:
        return True
    return flags.get(item.required_flag) is True


def _passes_access(item, role, flags, permissions):
    """Flag check first, then permissions when both sides have some, else role."""
    if not _passes_flags(item, flags):
        return False
    if item.permissions and permissions is not None:
        return any(code in permissions for code in item.permissions)
    return item.allows_role(role)


def filter_nav_tree(items, role, flags, permissions=None):
    """
    Depth-first filter of a navigation tree.

    - An item that fails its own check is dropped; its surviving children
      move up to its level
    - A passing parent keeps its surviving children
    - A passing parent whose children were all filtered out survives only
      when it has a direct path

    Returns:
        Tuple of NavItem copies
    """
    result = []
    for item in items:
        passes = _passes_access(item, role, flags, permissions)

        if not item.children:
            if passes:
                result.append(item)
            continue

        children = filter_nav_tree(item.children, role, flags, permissions)
        if not passes:
            result.extend(children)
        elif children:
            result.append(item.with_children(children))
        elif item.path:
            result.append(item.with_children(()))
    return tuple(result)


def flatten_nav_tree(items):
    """Flat list of every item in declaration order."""
    return list(iter_items(items))


# ===== ACTIVE ITEM =====

def find_active_item(items, pathname):
    """
    Find the item the pathname points at.

    Exact matches win. Otherwise the item with the longest path that is a
    strict prefix of the pathname is used, first declared winning ties.
    Items flagged ``exact`` never match by prefix and dividers never match.
    """
    pathname = normalize_pathname(pathname)
    if pathname is None:
        return None

    candidates = [item for item in iter_items(items) if item.path and not item.divider]

    for item in candidates:
        if normalize_pathname(item.path) == pathname:
            return item

    best = None
    best_length = -1
    for item in candidates:
        if item.exact:
            continue
        path = normalize_pathname(item.path)
        if path != pathname and pathname.startswith(path) and len(path) > best_length:
            best = item
            best_length = len(path)
    return best


def find_parents(items, active_item):
    """Ancestors of ``active_item`` from the root down to its direct parent."""
    if active_item is None:
        return ()

    def walk(nodes, trail):
        for node in nodes:
            if node is active_item or node.id == active_item.id:
                return trail
            found = walk(node.children, trail + (node,))
            if found is not None:
                return found
        return None

    trail = walk(items, ()) or ()
    return tuple(node for node in trail if not node.divider)


# ===== ENTRY POINT =====

def resolve_nav(tree, role, flags=None, pathname=None, permissions=None):
    """
    Resolve the navigation state for one request.

    Args:
        tree: Static navigation tree
        role: Canonical or backend role string; anything unknown is a guest
        flags: Mapping of feature flag name to bool
        pathname: Current request path
        permissions: Optional list of permission codes held by the viewer

    Returns:
        ResolvedNavState
    """
    canonical_role = roles.map_role(role)
    if not isinstance(flags, Mapping):
        flags = {}
    if permissions is not None:
        try:
            permissions = frozenset(p for p in permissions if isinstance(p, str))
        except TypeError:
            permissions = None

    tree_filtered = filter_nav_tree(tree, canonical_role, flags, permissions)
    active_item = find_active_item(tree_filtered, pathname)
    parents = find_parents(tree_filtered, active_item)

    logger.debug(
        f"Resolved nav for role={canonical_role} path={pathname}: "
        f"{len(tree_filtered)} roots, active={active_item.id if active_item else None}"
    )
    return ResolvedNavState(tree_filtered=tree_filtered, active_item=active_item, parents=parents)


def track_nav_click(item_id, path=None, user=None):
    """Record a sidebar click for analytics."""
    username = getattr(user, 'username', None) or 'anonymous'
    logger.info(f"Nav click: item={item_id} path={path} user={username}")
