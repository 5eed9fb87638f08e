"""
Role definitions for the Newsroom dashboard.

The backend hands out a heterogeneous set of role strings (``system_admin``,
``chief_editor``, ``content_creator`` ...). Everything that filters navigation
works on a small closed set of canonical roles instead. This module holds:

- The canonical role constants
- The exact lookup table from backend role strings to canonical roles
- Permission codes granted to each canonical role
- Arabic / English / Urdu labels for the backend roles
"""

# ===== CANONICAL ROLES =====

GUEST = 'guest'
READER = 'reader'
AUTHOR = 'author'
REPORTER = 'reporter'
OPINION_AUTHOR = 'opinion_author'
REVIEWER = 'reviewer'
COMMENTS_MODERATOR = 'comments_moderator'
ANALYST = 'analyst'
ADVERTISER = 'advertiser'
EDITOR = 'editor'
ADMIN = 'admin'

CANONICAL_ROLES = (
    GUEST,
    READER,
    AUTHOR,
    REPORTER,
    OPINION_AUTHOR,
    REVIEWER,
    COMMENTS_MODERATOR,
    ANALYST,
    ADVERTISER,
    EDITOR,
    ADMIN,
)

# Everyone who works inside the dashboard
STAFF_ROLES = (
    AUTHOR,
    REPORTER,
    OPINION_AUTHOR,
    REVIEWER,
    COMMENTS_MODERATOR,
    ANALYST,
    ADVERTISER,
    EDITOR,
    ADMIN,
)


# ===== BACKEND ROLE STRINGS =====

SYSTEM_ADMIN = 'system_admin'
MEDIA_MANAGER = 'media_manager'

BACKEND_ROLE_CHOICES = [
    (SYSTEM_ADMIN, 'System Admin'),
    (ADMIN, 'Admin'),
    ('chief_editor', 'Chief Editor'),
    (EDITOR, 'Editor'),
    (REPORTER, 'Reporter'),
    ('content_creator', 'Content Creator'),
    (AUTHOR, 'Author'),
    (OPINION_AUTHOR, 'Opinion Author'),
    (REVIEWER, 'Reviewer'),
    (COMMENTS_MODERATOR, 'Comments Moderator'),
    (MEDIA_MANAGER, 'Media Manager'),
    (ANALYST, 'Analyst'),
    (ADVERTISER, 'Advertiser'),
    ('publisher', 'Publisher'),
    (READER, 'Reader'),
]

# Exact lookup only. Anything missing from this table is a guest.
ROLE_ALIASES = {
    # administrators
    SYSTEM_ADMIN: ADMIN,
    'superadmin': ADMIN,
    'super_admin': ADMIN,
    ADMIN: ADMIN,
    # editorial desk
    EDITOR: EDITOR,
    'chief_editor': EDITOR,
    'managing_editor': EDITOR,
    'editor_in_chief': EDITOR,
    MEDIA_MANAGER: EDITOR,
    # writers
    REPORTER: REPORTER,
    'journalist': REPORTER,
    AUTHOR: AUTHOR,
    'content_creator': AUTHOR,
    'writer': AUTHOR,
    'publisher': AUTHOR,
    OPINION_AUTHOR: OPINION_AUTHOR,
    'columnist': OPINION_AUTHOR,
    # review and moderation
    REVIEWER: REVIEWER,
    'fact_checker': REVIEWER,
    COMMENTS_MODERATOR: COMMENTS_MODERATOR,
    'moderator': COMMENTS_MODERATOR,
    # business
    ANALYST: ANALYST,
    'data_analyst': ANALYST,
    ADVERTISER: ADVERTISER,
    'ads_manager': ADVERTISER,
    # public
    READER: READER,
    'user': READER,
    'subscriber': READER,
    GUEST: GUEST,
}


def map_role(raw):
    """
    Map a backend role string onto a canonical role.

    Total and idempotent: canonical roles map to themselves and every
    unknown value (including ``None`` and non-strings) maps to guest.

    Args:
        raw: Role string as stored on the user record

    Returns:
        One of CANONICAL_ROLES
    """
    if not isinstance(raw, str):
        return GUEST
    return ROLE_ALIASES.get(raw, GUEST)


# ===== PERMISSION CODES =====

ARTICLES_VIEW = 'articles.view'
ARTICLES_CREATE = 'articles.create'
ARTICLES_EDIT_OWN = 'articles.edit_own'
ARTICLES_EDIT_ANY = 'articles.edit_any'
ARTICLES_PUBLISH = 'articles.publish'
ARTICLES_UNPUBLISH = 'articles.unpublish'
ARTICLES_DELETE = 'articles.delete'
ARTICLES_FEATURE = 'articles.feature'

CATEGORIES_VIEW = 'categories.view'
CATEGORIES_CREATE = 'categories.create'
CATEGORIES_UPDATE = 'categories.update'

USERS_VIEW = 'users.view'
USERS_CREATE = 'users.create'
USERS_UPDATE = 'users.update'
USERS_DELETE = 'users.delete'
USERS_CHANGE_ROLE = 'users.change_role'

COMMENTS_VIEW = 'comments.view'
COMMENTS_VIEW_OWN = 'comments.view_own'
COMMENTS_APPROVE = 'comments.approve'
COMMENTS_REJECT = 'comments.reject'
COMMENTS_DELETE = 'comments.delete'

MEDIA_VIEW = 'media.view'
MEDIA_UPLOAD = 'media.upload'
MEDIA_EDIT = 'media.edit'
MEDIA_DELETE = 'media.delete'

SETTINGS_VIEW = 'settings.view'
SETTINGS_UPDATE = 'settings.update'

ANALYTICS_VIEW = 'analytics.view'
ANALYTICS_VIEW_OWN = 'analytics.view_own'

SYSTEM_VIEW_AUDIT = 'system.view_audit'

ALL_PERMISSIONS = (
    ARTICLES_VIEW, ARTICLES_CREATE, ARTICLES_EDIT_OWN, ARTICLES_EDIT_ANY,
    ARTICLES_PUBLISH, ARTICLES_UNPUBLISH, ARTICLES_DELETE, ARTICLES_FEATURE,
    CATEGORIES_VIEW, CATEGORIES_CREATE, CATEGORIES_UPDATE,
    USERS_VIEW, USERS_CREATE, USERS_UPDATE, USERS_DELETE, USERS_CHANGE_ROLE,
    COMMENTS_VIEW, COMMENTS_VIEW_OWN, COMMENTS_APPROVE, COMMENTS_REJECT,
    COMMENTS_DELETE,
    MEDIA_VIEW, MEDIA_UPLOAD, MEDIA_EDIT, MEDIA_DELETE,
    SETTINGS_VIEW, SETTINGS_UPDATE,
    ANALYTICS_VIEW, ANALYTICS_VIEW_OWN,
    SYSTEM_VIEW_AUDIT,
)

WILDCARD = '*'

# Keyed by canonical role, so every backend alias of a role gets exactly the
# codes of that role (system_admin == admin, chief_editor == editor).
CANONICAL_ROLE_PERMISSIONS = {
    ADMIN: [WILDCARD],
    EDITOR: [
        ARTICLES_VIEW, ARTICLES_CREATE, ARTICLES_EDIT_ANY, ARTICLES_PUBLISH,
        ARTICLES_UNPUBLISH, ARTICLES_FEATURE,
        MEDIA_VIEW, MEDIA_UPLOAD, MEDIA_EDIT,
        CATEGORIES_VIEW, CATEGORIES_CREATE, CATEGORIES_UPDATE,
        COMMENTS_VIEW, COMMENTS_APPROVE,
        ANALYTICS_VIEW,
    ],
    REPORTER: [
        ARTICLES_VIEW, ARTICLES_CREATE, ARTICLES_EDIT_OWN,
        MEDIA_VIEW, MEDIA_UPLOAD,
        COMMENTS_VIEW_OWN,
        ANALYTICS_VIEW_OWN,
    ],
    AUTHOR: [
        ARTICLES_VIEW, ARTICLES_CREATE, ARTICLES_EDIT_OWN,
        MEDIA_VIEW, MEDIA_UPLOAD,
    ],
    OPINION_AUTHOR: [
        ARTICLES_VIEW, ARTICLES_CREATE, ARTICLES_EDIT_OWN,
        MEDIA_VIEW, MEDIA_UPLOAD,
    ],
    REVIEWER: [
        ARTICLES_VIEW, MEDIA_VIEW,
    ],
    COMMENTS_MODERATOR: [
        COMMENTS_VIEW, COMMENTS_APPROVE, COMMENTS_REJECT, COMMENTS_DELETE,
    ],
    ANALYST: [ANALYTICS_VIEW],
    ADVERTISER: [],
    READER: [],
    GUEST: [],
}


def permissions_for_roles(role_names):
    """
    Collect the permission codes granted to a set of backend roles.

    Each role is mapped to its canonical role first. A wildcard grant
    expands to every known permission code.

    Args:
        role_names: Iterable of backend role strings

    Returns:
        Sorted list of permission codes
    """
    granted = set()
    for role_name in role_names or []:
        permissions = CANONICAL_ROLE_PERMISSIONS.get(map_role(role_name), [])
        if WILDCARD in permissions:
            return sorted(ALL_PERMISSIONS)
        granted.update(permissions)
    return sorted(granted)


def is_admin_role(raw):
    """Admins and system admins (auto-publish banner, role assignment)."""
    return raw in (ADMIN, SYSTEM_ADMIN)


def can_assign_role(assigner_role, target_role):
    """
    Check whether a user holding ``assigner_role`` may hand out ``target_role``.

    - System admins can assign any role
    - Admins can assign anything except system admin
    - Nobody else assigns roles
    """
    if assigner_role == SYSTEM_ADMIN:
        return True
    if assigner_role == ADMIN:
        return target_role != SYSTEM_ADMIN
    return False


# ===== LABELS =====

ROLE_LABELS = {
    'ar': {
        SYSTEM_ADMIN: 'مدير النظام',
        ADMIN: 'مسؤول',
        EDITOR: 'محرر',
        REPORTER: 'مراسل',
        COMMENTS_MODERATOR: 'مشرف تعليقات',
        MEDIA_MANAGER: 'مدير وسائط',
        READER: 'قارئ',
    },
    'en': {
        SYSTEM_ADMIN: 'System Admin',
        ADMIN: 'Admin',
        EDITOR: 'Editor',
        REPORTER: 'Reporter',
        COMMENTS_MODERATOR: 'Comments Moderator',
        MEDIA_MANAGER: 'Media Manager',
        READER: 'Reader',
    },
    'ur': {
        ADMIN: 'ایڈمن',
        EDITOR: 'ایڈیٹر',
        AUTHOR: 'مصنف',
    },
}


def role_label(raw, language='ar'):
    """
    Human readable label for a backend role in the given language.

    Urdu only knows admin / editor / author, so every other role is shown
    by its canonical group there. Unknown roles fall back to the raw string.
    """
    labels = ROLE_LABELS.get(language, ROLE_LABELS['ar'])
    if raw in labels:
        return labels[raw]
    if language == 'ur':
        canonical = map_role(raw)
        if canonical in (ADMIN, EDITOR):
            return labels[canonical]
        return labels[AUTHOR]
    return raw or ''
