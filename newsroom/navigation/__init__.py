from .breadcrumbs import Crumb, build_breadcrumbs, detect_language
from .items import NavItem, validate_tree
from .resolver import ResolvedNavState, flatten_nav_tree, resolve_nav, track_nav_click
