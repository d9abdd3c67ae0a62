"""Central enum definitions for the project."""

from enum import StrEnum


class NewsletterSource(StrEnum):
    """Newsletter family a message belongs to, derived from sender and subject."""

    TECH = "tech"
    AI = "ai"
    CRYPTO = "crypto"
    WEBDEV = "webdev"
    FOUNDERS = "founders"
    MARKETING = "marketing"
    DESIGN = "design"
    DEVOPS = "devops"
    SECURITY = "security"


class Provenance(StrEnum):
    """Extraction pass that produced a candidate."""

    HTML = "html"
    TEXT = "text"


class TopicCategory(StrEnum):
    """Topic tag attached to an article by keyword match."""

    AI = "ai"
    BIG_TECH = "big-tech"
    STARTUPS = "startups"
    PROGRAMMING = "programming"
    SCIENCE = "science"
    SECURITY = "security"


class ContentLabel(StrEnum):
    """Outcome of classifying a link and its surrounding text."""

    ACCEPT = "accept"
    REJECT_ADMIN = "reject_admin"
    REJECT_NAVIGATIONAL = "reject_navigational"
    REJECT_SPONSORED = "reject_sponsored"
