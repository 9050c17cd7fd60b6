"""Static selector, keyword and regex catalogues shared by the extractors.

Order matters in every tuple below: the locator and the cleaner walk them
front to back, and the locator stops at the first acceptable match.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Article containers (priority order, most reliable first)
# ---------------------------------------------------------------------------

ARTICLE_SELECTORS: tuple[str, ...] = (
    # schema.org microdata
    '[itemprop="articleBody"]',
    '[itemprop="blogPost"]',
    '[itemtype*="Article"] [itemprop="text"]',
    # data attributes
    '[data-testid="article-body"]',
    "[data-article-body]",
    "[data-content-body]",
    "[data-post-content]",
    # Chinese platforms
    "#js_content",              # WeChat
    ".rich_media_content",      # WeChat
    ".Post-RichText",           # Zhihu
    ".RichContent-inner",       # Zhihu
    ".PostIndex-content",       # Zhihu column
    "#artibody",                # Sina
    "#article-body",            # Sina
    ".article-content-left",    # Sina
    ".art_content",
    ".art_box",
    ".TRS_Editor",              # TRS CMS
    ".wp_articlecontent",
    ".con_txt",
    ".content_txt",
    ".news_txt",
    "#content_txt",
    ".article-holder",          # 36kr
    ".article-detail-bd",
    ".post-content-main",
    # international sites
    ".article-body",
    ".article__body",
    ".article-content",
    ".article_content",
    ".article-text",
    ".article-detail",
    ".story-body",
    ".story-body__inner",
    ".story-content",
    ".entry-content",
    ".post-body",
    ".post-content",
    ".post_content",
    ".content-body",
    ".blog-content",
    ".blog_content",
    ".markdown-body",           # GitHub
    ".blob-wrapper",
    # news sites
    ".main-content",
    ".news-content",
    ".content-article",
    ".text-content",
    ".news_content",
    ".news-article",
    ".news_article",
    # CMS themes
    ".td-post-content",
    ".jeg_inner_content",
    ".single-content",
    ".single-post-content",
    ".elementor-widget-theme-post-content",
    # Medium / Substack
    ".postArticle-content",
    # generic semantic containers (lowest priority)
    "article",
    '[role="article"]',
    '[role="main"]',
    "main",
)

# Ancestors with these tags disqualify a candidate
NON_CONTENT_ANCESTOR_TAGS: frozenset[str] = frozenset({"nav", "aside", "header", "footer"})

# Tags enumerated by the scored fallback
CANDIDATE_TAGS: tuple[str, ...] = ("div", "section", "article", "main")

# ---------------------------------------------------------------------------
# Readability-derived class/id regexes
# ---------------------------------------------------------------------------

UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|"
    r"footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|"
    r"skyscraper|social|sponsor|supplemental|ad-break|agegate|pagination|pager|popup|"
    r"yom-remote",
    re.IGNORECASE,
)

OK_MAYBE_ITS_A_CANDIDATE = re.compile(
    r"and|article|body|column|content|main|mathjax|shadow", re.IGNORECASE,
)

POSITIVE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|"
    r"story|reading",
    re.IGNORECASE,
)

NEGATIVE = re.compile(
    r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|footer|"
    r"gdpr|masthead|media|meta|outbrain|promo|related|scroll|share|shoutbox|sidebar|"
    r"skyscraper|sponsor|shopping|tags|tool|widget",
    re.IGNORECASE,
)

# Sentence terminators, Latin and CJK
SENTENCE_END_RE = re.compile(r"[.。！？!?]")


def is_unlikely_candidate(match_string: str) -> bool:
    """Unlikely-candidate keyword hit that the override pattern does not rescue."""
    return bool(
        UNLIKELY_CANDIDATES.search(match_string)
        and not OK_MAYBE_ITS_A_CANDIDATE.search(match_string),
    )


# ---------------------------------------------------------------------------
# Elements removed unconditionally by the cleaner
# ---------------------------------------------------------------------------

UNWANTED_SELECTORS: tuple[str, ...] = (
    # scripts, styles, invisible plumbing
    "script", "style", "noscript", "template",
    'link[rel="stylesheet"]', "meta",
    # embeds, known video hosts excepted
    'iframe:not([src*="youtube"]):not([src*="vimeo"]):not([src*="bilibili"])',
    "object", "embed", "applet",
    # semantic navigation
    "nav", "header", "footer",
    '[role="navigation"]', '[role="banner"]', '[role="contentinfo"]',
    '[role="complementary"]', '[role="search"]', '[role="menu"]',
    '[role="menubar"]', '[role="toolbar"]',
    # sidebars and widgets
    "aside",
    ".sidebar", ".side-bar", ".side_bar", "#sidebar",
    ".widget", ".widget-area", ".widgets",
    ".left-rail", ".right-rail",
    ".aside-content", ".aside-module",
    # comments
    ".comments", ".comment", ".comment-section", ".comment-list", ".comment-area",
    "#comments", "#comment-section", "#disqus_thread", "#respond",
    ".discuss", ".discussion", ".discussions",
    ".comment-form", ".comment-respond", ".comment-reply",
    '[class*="comment"]',
    # social sharing
    ".social-share", ".share-buttons", ".share-bar", ".share-box",
    ".social-buttons", ".sharing", ".social-links", ".social-icons",
    ".share-this", ".sharethis", ".addthis",
    ".share-container", ".sharing-buttons",
    '[class*="share-"]', '[class*="social-"]',
    "[data-share]", "[data-social]",
    # advertisements
    ".advertisement", ".ad", ".ads", ".ad-container", ".ad-wrapper", ".ad-slot",
    ".advert", ".advertising", ".adsbygoogle", ".ad-unit", ".ad-banner",
    ".sponsored", ".sponsor", ".promoted", ".promo",
    '[class*="ad-"]', '[class*="advert"]', '[class*="sponsor"]',
    '[id*="ad-"]', '[id*="advert"]', '[id*="sponsor"]',
    "[data-ad]", "[data-advertisement]", "[data-sponsored]",
    "ins.adsbygoogle",
    # related content / recommendation networks
    ".related-posts", ".related-articles", ".related-content", ".related-links",
    ".related", ".recommended", ".recommendations", ".suggested",
    ".more-stories", ".read-more", ".also-read", ".you-may-like",
    ".more-from", ".more-in", ".read-next", ".up-next",
    ".outbrain", ".taboola", ".mgid",
    '[class*="related"]', '[class*="recommend"]',
    # in-page navigation
    ".breadcrumb", ".breadcrumbs", ".bread-crumb",
    ".pagination", ".pager", ".page-nav", ".page-numbers",
    ".prev-next", ".nav-links", ".post-navigation",
    ".toc", ".table-of-contents",
    # author / meta boxes
    ".author-box", ".author-info", ".author-bio", ".author-card",
    ".byline", ".meta-info", ".post-meta", ".entry-meta",
    ".article-meta", ".article-info",
    # subscriptions and calls to action
    ".newsletter", ".subscribe", ".subscription", ".signup",
    ".cta", ".call-to-action", ".email-signup",
    ".follow-us", ".follow-box",
    ".membership", ".paywall", ".premium-content",
    '[class*="newsletter"]', '[class*="subscribe"]',
    # popups, modals, overlays
    ".popup", ".modal", ".overlay", ".lightbox",
    ".dialog", ".drawer", ".flyout",
    '[class*="popup"]', '[class*="modal"]',
    # hidden elements
    '[aria-hidden="true"]',
    "[hidden]",
    ".hidden", ".hide", ".invisible", ".sr-only", ".visually-hidden",
    ".d-none", ".display-none",
    '[style*="display: none"]', '[style*="display:none"]',
    '[style*="visibility: hidden"]',
    # interactive widgets
    ".accordion", ".tabs-container", ".tab-navigation",
    ".dropdown", ".dropdown-menu",
    ".tooltip", ".popover",
    # forms
    'form:not([class*="search"])',
    ".login-form", ".register-form", ".contact-form",
    ".form-wrapper", ".form-container",
    # e-commerce
    ".cart", ".shopping-cart", ".add-to-cart",
    ".price-box", ".buy-now", ".purchase",
    ".product-meta", ".product-details",
    # Chinese portals: hot lists, feeds, QR codes, statements
    ".hot-news", ".hot-list", ".hot-words", ".hot-search",
    ".rank-list", ".ranking", ".top-list",
    ".news-list", ".article-list", ".post-list",
    ".recommend-list", ".recommend-box", ".recommend-module",
    ".feed-list", ".feed-item",
    ".timeline", ".weibo-list", ".weibo-feed",
    ".media-list", ".card-list", ".photo-list", ".video-list",
    ".keywords", ".tags-list", ".tag-list", ".key-word", ".tags",
    ".statement", ".copyright", ".disclaimer", ".notice",
    ".qrcode", ".qr-code", ".scan-code",
    ".app-download", ".download-app",
    ".follow-wechat", ".wechat-qr",
    ".live-chat", ".customer-service",
    ".back-to-top", ".gotop",
    # article chrome
    ".article-footer", ".entry-footer", ".post-footer",
    ".article-tags", ".entry-tags", ".post-tags",
    ".article-source", ".source-info",
    ".print-only", ".no-print",
)

# ---------------------------------------------------------------------------
# Class/id substrings swept by the cleaner
# ---------------------------------------------------------------------------

SUSPICIOUS_KEYWORDS: tuple[str, ...] = (
    # navigation / chrome
    "comment", "sidebar", "side-bar", "widget", "footer", "header",
    "nav", "menu", "breadcrumb", "pagination", "pager",
    # promotion
    "recommend", "related", "advertisement", "ad-", "advert", "sponsor", "promo",
    "social", "share", "subscribe", "newsletter", "signup", "cta",
    # dynamic UI
    "popup", "modal", "overlay", "dialog", "toast", "notification",
    "dropdown", "tooltip", "popover",
    # lists and feeds
    "ranking", "hot-", "rank-", "list-news", "feed-", "timeline",
    "trending", "popular", "top-",
    # interactive widgets
    "accordion", "tab-", "tabs-", "carousel", "slider", "gallery",
    # Chinese platforms
    "qrcode", "qr-code", "wechat", "weixin", "app-download",
)

# A keyword hit is ignored when the element carries any of these
MEDIA_TAGS: tuple[str, ...] = ("img", "video", "picture", "figure")

# Kept by empty-element pruning (themselves, or as descendants)
PRESERVED_EMPTY_TAGS: tuple[str, ...] = (
    "img", "video", "audio", "svg", "canvas", "iframe", "picture", "figure", "table",
)

# ---------------------------------------------------------------------------
# Inline metadata chips (bylines, dates, counters, sources)
# ---------------------------------------------------------------------------

METADATA_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(作者|编辑|来源|责编|记者)[：:]"),
    re.compile(r"^(发布|更新|修改)(时间|日期)[：:]"),
    re.compile(r"^(阅读|浏览|评论|点赞)\s*[：:]?\s*\d+"),
    re.compile(r"^(原文链接|转载自|出处)[：:]"),
    re.compile(r"^(by|author|source|editor)[:\s]", re.IGNORECASE),
    re.compile(r"^(posted|published|updated|modified)[:\s]", re.IGNORECASE),
    re.compile(r"^\d+\s*(views?|reads?|comments?|likes?)", re.IGNORECASE),
)

# ---------------------------------------------------------------------------
# Free-text noise (article mode only)
# ---------------------------------------------------------------------------

NOISE_TEXT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pat, flags)
    for pat, flags in (
        # Chinese interaction
        (r"^(阅读|评论|点赞|分享|收藏|转发|举报|喜欢|赞同|反对)[\s:：]?\d*", 0),
        (r"^(热门|推荐|相关|更多|精选|最新|热点)[\s:：]", 0),
        (r"^(加载中|loading|正在加载)", re.IGNORECASE),
        (r"^(登录|注册|退出|登出|注销)", 0),
        (r"^(上一篇|下一篇|返回|回到顶部|回到首页)", 0),
        (r"^(版权|声明|免责|法律|隐私|条款)", 0),
        (r"^(关注|订阅|扫码|扫一扫|长按识别)", 0),
        (r"^(广告|推广|赞助|商业合作)", re.IGNORECASE),
        (r"^(编辑|责编|责任编辑|来源|出处|原文链接)[\s:：]", 0),
        (r"^(作者|记者|撰文|文/|图/)", 0),
        (r"^(本文|此文|该文)(转载|来自|出自)", 0),
        (r"^(点击|查看|了解)(更多|详情|全文)", 0),
        (r"^(分类|标签|Tags?)[\s:：]", re.IGNORECASE),
        (r"^\d+\s*(阅读|浏览|评论|回复|点赞|收藏)", 0),
        (r"^(发布|更新|修改)(时间|日期|于)[\s:：]", 0),
        # English interaction
        (r"^(read|views?|comments?|likes?|shares?|reactions?)[\s:]*\d*", re.IGNORECASE),
        (r"^(loading|please wait|fetching)", re.IGNORECASE),
        (r"^(sign in|log ?in|sign up|register|create account)", re.IGNORECASE),
        (r"^(previous|next|back to|return to)", re.IGNORECASE),
        (r"^(copyright|©|all rights reserved)", re.IGNORECASE),
        (r"^(follow us|subscribe|newsletter)", re.IGNORECASE),
        (r"^(advertisement|sponsored|promoted)", re.IGNORECASE),
        (r"^(written by|by\s+\w+|author[\s:]*)", re.IGNORECASE),
        (r"^(source|via|originally published)", re.IGNORECASE),
        (r"^(click here|learn more|read more|see more)", re.IGNORECASE),
        (r"^(category|categories|tags?)[\s:]", re.IGNORECASE),
        (r"^(posted|published|updated)[\s:]*(on|at)?", re.IGNORECASE),
        (r"^(share|tweet|pin|email) this", re.IGNORECASE),
        # social media
        (r"^(tweet|retweet|like|follow|share on)", re.IGNORECASE),
        (r"^(facebook|twitter|instagram|linkedin|pinterest|whatsapp)", re.IGNORECASE),
        (r"^@\w+\s*(说|said|tweeted|wrote)", re.IGNORECASE),
        # navigation
        (r"^(home|about|contact|menu|navigation)", re.IGNORECASE),
        (r"^(首页|关于|联系|菜单|导航)", 0),
        # e-commerce
        (r"^(add to cart|buy now|purchase|order now)", re.IGNORECASE),
        (r"^(加入购物车|立即购买|立即下单|马上抢购)", 0),
        (r"^(¥|￥|\$|€|£)\s*\d+", 0),
        (r"^\d+(\.\d{2})?\s*(元|块|美元|dollars?)", re.IGNORECASE),
        # cookie / privacy notices
        (r"^(we use cookies|cookie policy|accept cookies)", re.IGNORECASE),
        (r"^(privacy policy|terms of service|user agreement)", re.IGNORECASE),
        # bare dates and times
        (r"^\d{1,2}[\s/\-]\d{1,2}[\s/\-]\d{2,4}$", 0),
        (r"^\d{1,2}:\d{2}(:\d{2})?(\s*(am|pm))?$", re.IGNORECASE),
    )
)

NOISE_PHRASES: tuple[str, ...] = (
    "点击查看", "展开全文", "显示全部", "查看更多", "阅读原文",
    "分享到", "转发给", "复制链接", "举报", "投诉",
    "read more", "show more", "see all", "expand", "click here",
    "share this", "copy link", "report",
)

# ---------------------------------------------------------------------------
# Site-specific removals, keyed by hostname substrings
# ---------------------------------------------------------------------------

SITE_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("weixin.qq.com", "mp.weixin"), (
        ".rich_media_meta_list", ".rich_media_area_extra", ".qr_code_pc",
        ".reward_area", ".like_area",
    )),
    (("zhihu.com",), (
        ".ContentItem-actions", ".Reward", ".FollowButton", ".VoteButton",
        ".ContentItem-meta", ".RichContent-actions",
    )),
    (("sina.com", "weibo.com"), (
        ".article-info", ".article-source", ".article-editor", ".sina-share",
        ".keywords", ".article-keywords",
    )),
    (("medium.com",), (".pw-post-body-actions", ".ae.lx", ".speechify-ignore")),
    (("github.com",), (
        ".flash", ".flash-notice", ".flash-warn", ".Box-header", ".file-navigation",
        ".commit-tease",
    )),
    (("36kr.com",), (
        ".article-bottom", ".article-title-icon", ".article-info-wrap", ".article-share",
    )),
    (("csdn.net",), (
        ".article-bar-top", ".hide-article-box", ".recommend-box", ".blog-vote-box",
        ".csdn-side-toolbar",
    )),
    (("juejin.cn", "juejin.im"), (
        ".article-suspended-panel", ".follow-button", ".like-btn", ".comment-action",
    )),
    (("zhuanlan.zhihu.com",), (".ColumnPageHeader", ".Post-SideActions", ".FollowButton")),
    (("jianshu.com",), (".author", ".follow-btn", ".like-btn", ".share-btn", "._1kCBjS")),
    (("substack.com",), (".subscribe-widget", ".footer-wrap", ".post-meta")),
)


def site_selectors(hostname: str) -> list[str]:
    """Return the removal selectors for every rule whose key occurs in *hostname*."""
    selectors: list[str] = []
    for hosts, rule_selectors in SITE_RULES:
        if any(host in hostname for host in hosts):
            selectors.extend(rule_selectors)
    return selectors
