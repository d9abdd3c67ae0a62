"""Declarative rule tables used by the extraction engine.

Every heuristic literal lives here so each entry can be tested on its own and
overridden through ExtractionSettings.
"""

from src.enums import NewsletterSource, TopicCategory

# Host prefixes (scheme stripped) of click-tracking redirects that embed the
# real destination as a percent-encoded path segment
TRACKING_HOST_PREFIXES: list[str] = [
    "tracking.tldrnewsletter.com/CL0/",
]

# Query parameters removed from every canonical URL
TRACKING_PARAMS: list[str] = [
    "gclid",
    "fbclid",
    "mc_cid",
    "mc_eid",
    "_hsenc",
    "_hsmi",
    "mkt_tok",
    "vero_id",
    "oly_enc_id",
    "oly_anon_id",
    "ck_subscriber_id",
]

TRACKING_PARAM_PREFIXES: list[str] = [
    "utm_",
]

# Substrings (matched against host+path) that are never article destinations
DOMAIN_BLOCKLIST: list[str] = [
    # Newsletter's own properties
    "tldrnewsletter.com",
    "tldr.tech",
    # Mailing platforms and subscription management
    "list-manage.com",
    "mailchimp.com",
    "beehiiv.com",
    "convertkit.com",
    "unsubscribe",
    "manage-preferences",
    "email-preferences",
    # Social profiles
    "twitter.com",
    "facebook.com",
    "instagram.com",
    "linkedin.com",
    "tiktok.com",
    "youtube.com/@",
    "youtube.com/channel/",
]

# Anchor text or destination fragments of administrative links
ADMIN_KEYWORDS: list[str] = [
    "unsubscribe",
    "manage preferences",
    "manage your subscription",
    "update your preferences",
    "email preferences",
    "view in browser",
    "view online",
    "view this email",
    "sign up",
    "signup",
    "feedback",
    "advertise",
    "forward to a friend",
    "refer a friend",
    "apply here",
]

ADMIN_DOMAINS: list[str] = [
    "list-manage.com",
    "mailchimp.com",
    "advertise.tldr.tech",
    "refer.tldr.tech",
    "/unsubscribe",
    "/preferences",
    "/signup",
    "/feedback",
]

# Exact (case-insensitive) titles that only navigate within the newsletter
NAVIGATIONAL_PHRASES: list[str] = [
    "read more",
    "read online",
    "click here",
    "learn more",
    "continue reading",
    "here",
    "link",
    "website",
    "headlines & launches",
    "deep dives & analysis",
    "engineering & research",
    "miscellaneous",
    "quick links",
]

# Markers of paid placements in the text surrounding a link
SPONSOR_MARKERS: list[str] = [
    "sponsor",
    "brought to you by",
    "partner content",
    "paid partnership",
    "advertisement",
    "presented by",
]

# Regexes removed from summaries before sentence detection
PROMOTIONAL_PATTERNS: list[str] = [
    r"[^.!?]*\bsign[\s-]?up\b[^.!?]*[.!?]?",
    r"[^.!?]*\bsubscribe\b[^.!?]*[.!?]?",
    r"[^.!?]*\b(?:share|forward) (?:this|tldr)\b[^.!?]*[.!?]?",
    r"[^.!?]*\bwant to advertise\b[^.!?]*[.!?]?",
    r"[^.!?]*\bview (?:this email )?in (?:your )?browser\b[^.!?]*[.!?]?",
    r"https?://\S+",
    r"\S*(?:utm_|mc_cid|mc_eid)\S*",
    r"\b(?=[A-Za-z0-9]*\d)(?=[A-Za-z0-9]*[A-Za-z])[A-Za-z0-9]{24,}\b",
]

# Ordered: first matching topic wins
TOPIC_KEYWORDS: dict[TopicCategory, list[str]] = {
    TopicCategory.AI: [
        "ai",
        "artificial intelligence",
        "machine learning",
        "llm",
        "llms",
        "gpt",
        "openai",
        "anthropic",
        "chatbot",
        "neural",
        "deep learning",
    ],
    TopicCategory.BIG_TECH: [
        "apple",
        "google",
        "microsoft",
        "amazon",
        "meta",
        "nvidia",
        "tesla",
        "netflix",
    ],
    TopicCategory.STARTUPS: [
        "startup",
        "startups",
        "funding",
        "raises",
        "series a",
        "series b",
        "seed round",
        "venture",
        "ipo",
        "acquisition",
    ],
    TopicCategory.PROGRAMMING: [
        "programming",
        "developer",
        "developers",
        "python",
        "javascript",
        "typescript",
        "rust",
        "github",
        "api",
        "open source",
        "framework",
    ],
    TopicCategory.SCIENCE: [
        "science",
        "scientists",
        "research",
        "researchers",
        "study",
        "nasa",
        "space",
        "physics",
        "biology",
        "climate",
    ],
    TopicCategory.SECURITY: [
        "security",
        "vulnerability",
        "breach",
        "hack",
        "hackers",
        "malware",
        "ransomware",
        "exploit",
        "phishing",
    ],
}

# Ordered: first matching source wins, default is TECH
SOURCE_PATTERNS: list[tuple[NewsletterSource, list[str]]] = [
    (NewsletterSource.WEBDEV, [r"\bweb\s?dev\b", r"\btldr dev\b", r"\bfrontend\b"]),
    (NewsletterSource.DEVOPS, [r"\bdevops\b"]),
    (NewsletterSource.SECURITY, [r"\binfosec\b", r"\bsecurity\b", r"\bcyber"]),
    (NewsletterSource.CRYPTO, [r"\bcrypto\b", r"\bweb3\b", r"\bbitcoin\b", r"\bblockchain\b"]),
    (NewsletterSource.FOUNDERS, [r"\bfounders?\b"]),
    (NewsletterSource.MARKETING, [r"\bmarketing\b"]),
    (NewsletterSource.DESIGN, [r"\bdesign\b"]),
    (NewsletterSource.AI, [r"\bai\b", r"\bartificial intelligence\b"]),
]

NON_NEWSLETTER_SUBJECT_KEYWORDS: list[str] = [
    "confirm",
    "confirmation",
    "welcome",
    "verify",
    "subscription",
]
