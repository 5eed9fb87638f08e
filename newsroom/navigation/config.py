"""
Static navigation trees, one per layout shell.

The trees are built once at import and validated immediately, so a
duplicated id or a navigable divider fails loudly at startup instead of
producing a half-broken sidebar.
"""
from django.conf import settings

from .. import roles
from .items import NavItem, divider, validate_tree


# Roles that write or edit content
CONTENT_ROLES = (
    roles.AUTHOR,
    roles.REPORTER,
    roles.OPINION_AUTHOR,
    roles.REVIEWER,
    roles.EDITOR,
    roles.ADMIN,
)

EDITORIAL_ROLES = (roles.EDITOR, roles.ADMIN)

DEFAULT_FEATURE_FLAGS = {
    'aiDeepAnalysis': False,
    'smartThemes': True,
    'audioSummaries': False,
}


def get_feature_flags():
    """Feature flags from settings, on top of the defaults."""
    flags = dict(DEFAULT_FEATURE_FLAGS)
    flags.update(getattr(settings, 'NEWSROOM_FEATURE_FLAGS', {}) or {})
    return flags


# ===== ARABIC DASHBOARD =====

DASHBOARD_NAV = validate_tree([
    NavItem(
        id='dashboard-home',
        label_key='nav.dashboard',
        label_ar='لوحة التحكم',
        label_en='Dashboard',
        label_ur='ڈیش بورڈ',
        path='/dashboard',
        icon='layout-dashboard',
        required_role=roles.STAFF_ROLES,
        exact=True,
    ),

    divider('dashboard-divider-content', 'nav.group.content', 'المحتوى', 'Content', 'مواد'),
    NavItem(
        id='dashboard-content',
        label_key='nav.content',
        label_ar='إدارة المحتوى',
        label_en='Content',
        label_ur='مواد',
        icon='newspaper',
        required_role=CONTENT_ROLES + (roles.COMMENTS_MODERATOR,),
        children=(
            NavItem(
                id='dashboard-articles',
                label_key='nav.articles',
                label_ar='الأخبار',
                label_en='Articles',
                label_ur='مضامین',
                path='/dashboard/articles',
                icon='file-text',
                required_role=CONTENT_ROLES,
                permissions=(roles.ARTICLES_VIEW,),
            ),
            NavItem(
                id='dashboard-categories',
                label_key='nav.categories',
                label_ar='التصنيفات',
                label_en='Categories',
                label_ur='زمرے',
                path='/dashboard/categories',
                icon='folder-tree',
                required_role=EDITORIAL_ROLES,
                permissions=(roles.CATEGORIES_VIEW,),
            ),
            NavItem(
                id='dashboard-opinion',
                label_key='nav.opinion',
                label_ar='مقالات الرأي',
                label_en='Opinion',
                label_ur='رائے',
                path='/dashboard/opinion',
                icon='pen-line',
                required_role=(roles.OPINION_AUTHOR, roles.EDITOR, roles.ADMIN),
            ),
            NavItem(
                id='dashboard-comments',
                label_key='nav.comments',
                label_ar='التعليقات',
                label_en='Comments',
                label_ur='تبصرے',
                path='/dashboard/comments',
                icon='message-square',
                required_role=(roles.COMMENTS_MODERATOR, roles.EDITOR, roles.ADMIN),
                permissions=(roles.COMMENTS_VIEW,),
            ),
            NavItem(
                id='dashboard-media',
                label_key='nav.media',
                label_ar='مكتبة الوسائط',
                label_en='Media Library',
                label_ur='میڈیا',
                path='/dashboard/media',
                icon='image',
                required_role=CONTENT_ROLES,
                permissions=(roles.MEDIA_VIEW,),
            ),
        ),
    ),

    divider('dashboard-divider-ai', 'nav.group.ai', 'أدوات الذكاء الاصطناعي', 'AI Tools', 'اے آئی ٹولز'),
    NavItem(
        id='dashboard-ai',
        label_key='nav.ai',
        label_ar='الذكاء الاصطناعي',
        label_en='AI Tools',
        label_ur='اے آئی',
        icon='sparkles',
        required_role=CONTENT_ROLES,
        children=(
            NavItem(
                id='dashboard-ai-summarize',
                label_key='nav.ai.summarize',
                label_ar='التلخيص',
                label_en='Summarize',
                label_ur='خلاصہ',
                path='/dashboard/ai/summarize',
                icon='align-left',
                required_role=CONTENT_ROLES,
            ),
            NavItem(
                id='dashboard-ai-translate',
                label_key='nav.ai.translate',
                label_ar='الترجمة',
                label_en='Translate',
                label_ur='ترجمہ',
                path='/dashboard/ai/translate',
                icon='languages',
                required_role=CONTENT_ROLES,
            ),
            NavItem(
                id='dashboard-ai-fact-check',
                label_key='nav.ai.factCheck',
                label_ar='التحقق من الحقائق',
                label_en='Fact Check',
                label_ur='حقائق کی جانچ',
                path='/dashboard/ai/fact-check',
                icon='shield-check',
                required_role=(roles.REVIEWER, roles.EDITOR, roles.ADMIN),
            ),
            NavItem(
                id='dashboard-ai-seo',
                label_key='nav.ai.seo',
                label_ar='تحسين محركات البحث',
                label_en='SEO',
                label_ur='ایس ای او',
                path='/dashboard/ai/seo',
                icon='search',
                required_role=CONTENT_ROLES,
            ),
            NavItem(
                id='dashboard-ai-deep-analysis',
                label_key='nav.ai.deepAnalysis',
                label_ar='التحليل العميق',
                label_en='Deep Analysis',
                label_ur='گہرا تجزیہ',
                path='/dashboard/ai/deep-analysis',
                icon='brain',
                required_role=EDITORIAL_ROLES,
                required_flag='aiDeepAnalysis',
            ),
            NavItem(
                id='dashboard-ai-audio-summaries',
                label_key='nav.ai.audioSummaries',
                label_ar='الملخصات الصوتية',
                label_en='Audio Summaries',
                label_ur='آڈیو خلاصے',
                path='/dashboard/ai/audio-summaries',
                icon='headphones',
                required_role=CONTENT_ROLES,
                required_flag='audioSummaries',
            ),
        ),
    ),

    divider('dashboard-divider-ads', 'nav.group.ads', 'الإعلانات', 'Advertising', 'اشتہارات'),
    NavItem(
        id='dashboard-ads',
        label_key='nav.ads',
        label_ar='الحملات الإعلانية',
        label_en='Campaigns',
        label_ur='مہمات',
        path='/dashboard/ads',
        icon='megaphone',
        required_role=(roles.ADVERTISER, roles.ADMIN),
        children=(
            NavItem(
                id='dashboard-ads-creatives',
                label_key='nav.ads.creatives',
                label_ar='المواد الإعلانية',
                label_en='Creatives',
                label_ur='تخلیقات',
                path='/dashboard/ads/creatives',
                icon='palette',
                required_role=(roles.ADVERTISER, roles.ADMIN),
            ),
            NavItem(
                id='dashboard-ads-placements',
                label_key='nav.ads.placements',
                label_ar='مواضع الإعلانات',
                label_en='Placements',
                label_ur='جگہیں',
                path='/dashboard/ads/placements',
                icon='layout-grid',
                required_role=roles.ADMIN,
            ),
        ),
    ),

    divider('dashboard-divider-communication', 'nav.group.communication', 'التواصل', 'Communication', 'رابطہ'),
    NavItem(
        id='dashboard-notifications',
        label_key='nav.notifications',
        label_ar='الإشعارات',
        label_en='Notifications',
        label_ur='اطلاعات',
        path='/dashboard/notifications',
        icon='bell',
        required_role=roles.STAFF_ROLES,
    ),
    NavItem(
        id='dashboard-announcements',
        label_key='nav.announcements',
        label_ar='الإعلانات الداخلية',
        label_en='Announcements',
        label_ur='اعلانات',
        path='/dashboard/announcements',
        icon='radio',
        required_role=EDITORIAL_ROLES,
    ),
    NavItem(
        id='dashboard-whatsapp',
        label_key='nav.whatsapp',
        label_ar='واتساب',
        label_en='WhatsApp',
        label_ur='واٹس ایپ',
        icon='message-circle',
        required_role=roles.ADMIN,
        children=(
            NavItem(
                id='dashboard-whatsapp-tokens',
                label_key='nav.whatsapp.tokens',
                label_ar='الرموز',
                label_en='Tokens',
                label_ur='ٹوکن',
                path='/dashboard/whatsapp/tokens',
                icon='key',
                required_role=roles.ADMIN,
            ),
            NavItem(
                id='dashboard-whatsapp-logs',
                label_key='nav.whatsapp.logs',
                label_ar='السجلات',
                label_en='Logs',
                label_ur='لاگز',
                path='/dashboard/whatsapp/logs',
                icon='scroll-text',
                required_role=roles.ADMIN,
            ),
        ),
    ),

    divider('dashboard-divider-system', 'nav.group.system', 'النظام', 'System', 'سسٹم'),
    NavItem(
        id='dashboard-analytics',
        label_key='nav.analytics',
        label_ar='التحليلات',
        label_en='Analytics',
        label_ur='تجزیات',
        path='/dashboard/analytics',
        icon='bar-chart',
        required_role=(roles.ANALYST, roles.EDITOR, roles.ADMIN),
        permissions=(roles.ANALYTICS_VIEW, roles.ANALYTICS_VIEW_OWN),
    ),
    NavItem(
        id='dashboard-users',
        label_key='nav.users',
        label_ar='المستخدمون',
        label_en='Users',
        label_ur='صارفین',
        path='/dashboard/users',
        icon='users',
        required_role=roles.ADMIN,
        permissions=(roles.USERS_VIEW,),
        children=(
            NavItem(
                id='dashboard-roles',
                label_key='nav.roles',
                label_ar='الأدوار والصلاحيات',
                label_en='Roles & Permissions',
                label_ur='کردار',
                path='/dashboard/users/roles',
                icon='shield',
                required_role=roles.ADMIN,
                permissions=(roles.USERS_CHANGE_ROLE,),
            ),
        ),
    ),
    NavItem(
        id='dashboard-settings',
        label_key='nav.settings',
        label_ar='الإعدادات',
        label_en='Settings',
        label_ur='ترتیبات',
        path='/dashboard/settings',
        icon='settings',
        required_role=roles.ADMIN,
        permissions=(roles.SETTINGS_VIEW,),
        children=(
            NavItem(
                id='dashboard-themes',
                label_key='nav.themes',
                label_ar='السمات الذكية',
                label_en='Smart Themes',
                label_ur='تھیمز',
                path='/dashboard/settings/themes',
                icon='paintbrush',
                required_role=roles.ADMIN,
                required_flag='smartThemes',
            ),
        ),
    ),
    NavItem(
        id='dashboard-profile',
        label_key='nav.profile',
        label_ar='الملف الشخصي',
        label_en='Profile',
        label_ur='پروفائل',
        path='/dashboard/profile',
        icon='user',
    ),
])


# ===== URDU DASHBOARD =====

URDU_NAV = validate_tree([
    NavItem(
        id='ur-dashboard',
        label_key='nav.dashboard',
        label_ar='لوحة التحكم',
        label_en='Dashboard',
        label_ur='ڈیش بورڈ',
        path='/ur/dashboard',
        icon='layout-dashboard',
        required_role=(roles.AUTHOR, roles.EDITOR, roles.ADMIN),
        exact=True,
    ),

    divider('ur-divider-content', 'nav.group.content', 'المحتوى', 'Content', 'مواد'),
    NavItem(
        id='ur-articles',
        label_key='nav.articles',
        label_ar='الأخبار',
        label_en='Articles',
        label_ur='مضامین',
        path='/ur/dashboard/articles',
        icon='file-text',
        required_role=(roles.AUTHOR, roles.EDITOR, roles.ADMIN),
        children=(
            NavItem(
                id='ur-articles-new',
                label_key='nav.articles.new',
                label_ar='خبر جديد',
                label_en='New Article',
                label_ur='نیا مضمون',
                path='/ur/dashboard/articles/new',
                icon='file-plus',
                required_role=(roles.AUTHOR, roles.EDITOR, roles.ADMIN),
            ),
        ),
    ),
    NavItem(
        id='ur-categories',
        label_key='nav.categories',
        label_ar='التصنيفات',
        label_en='Categories',
        label_ur='زمرے',
        path='/ur/dashboard/categories',
        icon='folder-tree',
        required_role=(roles.EDITOR, roles.ADMIN),
    ),
    NavItem(
        id='ur-comments',
        label_key='nav.comments',
        label_ar='التعليقات',
        label_en='Comments',
        label_ur='تبصرے',
        path='/ur/dashboard/comments',
        icon='message-square',
        required_role=(roles.EDITOR, roles.ADMIN),
    ),

    divider('ur-divider-ai', 'nav.group.ai', 'أدوات الذكاء الاصطناعي', 'AI Tools', 'اے آئی ٹولز'),
    NavItem(
        id='ur-ai-deep-analysis',
        label_key='nav.ai.deepAnalysis',
        label_ar='التحليل العميق',
        label_en='Deep Analysis',
        label_ur='گہرا تجزیہ',
        path='/ur/dashboard/ai/deep-analysis',
        icon='brain',
        required_role=(roles.EDITOR, roles.ADMIN),
        required_flag='aiDeepAnalysis',
    ),
    NavItem(
        id='ur-ai-audio-summaries',
        label_key='nav.ai.audioSummaries',
        label_ar='الملخصات الصوتية',
        label_en='Audio Summaries',
        label_ur='آڈیو خلاصے',
        path='/ur/dashboard/ai/audio-summaries',
        icon='headphones',
        required_role=(roles.AUTHOR, roles.EDITOR, roles.ADMIN),
        required_flag='audioSummaries',
    ),

    divider('ur-divider-system', 'nav.group.system', 'النظام', 'System', 'سسٹم', required_role=roles.ADMIN),
    NavItem(
        id='ur-users',
        label_key='nav.users',
        label_ar='المستخدمون',
        label_en='Users',
        label_ur='صارفین',
        path='/ur/dashboard/users',
        icon='users',
        required_role=roles.ADMIN,
    ),
    NavItem(
        id='ur-themes',
        label_key='nav.themes',
        label_ar='السمات الذكية',
        label_en='Smart Themes',
        label_ur='تھیمز',
        path='/ur/dashboard/themes',
        icon='paintbrush',
        required_role=roles.ADMIN,
        required_flag='smartThemes',
    ),
])


# ===== PUBLISHER PORTAL =====

PUBLISHER_ROLES = (roles.AUTHOR, roles.EDITOR, roles.ADMIN)

PUBLISHER_NAV = validate_tree([
    NavItem(
        id='publisher-dashboard',
        label_key='nav.publisher.dashboard',
        label_ar='لوحة التحكم',
        label_en='Dashboard',
        label_ur='ڈیش بورڈ',
        path='/dashboard/publisher',
        icon='layout-dashboard',
        required_role=PUBLISHER_ROLES,
        exact=True,
    ),
    NavItem(
        id='publisher-articles',
        label_key='nav.publisher.articles',
        label_ar='المقالات',
        label_en='Articles',
        label_ur='مضامین',
        path='/dashboard/publisher/articles',
        icon='file-text',
        required_role=PUBLISHER_ROLES,
    ),
    NavItem(
        id='publisher-credits',
        label_key='nav.publisher.credits',
        label_ar='سجل الرصيد',
        label_en='Credit History',
        label_ur='کریڈٹ کی تاریخ',
        path='/dashboard/publisher/credits',
        icon='credit-card',
        required_role=PUBLISHER_ROLES,
    ),
])
