"""
Domain Constants

This module contains constant definitions valid across the domain layer.
"""

DEFAULT_SPORT = "football"

# Route aliases that collapse onto a canonical sport key
SPORT_ALIASES = {
    "soccer": "football",
    "ice-hockey": "hockey",
    "american-football": "nfl",
}

# Search engine display limits
TITLE_MAX_LENGTH = 60
DESCRIPTION_MAX_LENGTH = 155

# Default tabs per page kind
DEFAULT_MATCH_TAB = "summary"
DEFAULT_SPORTS_TAB = "all"

# Provider status short codes that mean the game is in progress
LIVE_STATUS_CODES = {"1H", "2H", "HT", "ET", "P", "Q1", "Q2", "Q3", "Q4", "OT", "BT"}

# schema.org EventStatusType vocabulary (closed set)
EVENT_STATUS_SCHEDULED = "https://schema.org/EventScheduled"
EVENT_STATUS_POSTPONED = "https://schema.org/EventPostponed"
EVENT_STATUS_CANCELLED = "https://schema.org/EventCancelled"

POSTPONED_STATUS_CODES = {"PST", "Postponed"}
CANCELLED_STATUS_CODES = {"CANC", "ABD", "Cancelled"}

# Static page keys and the canonical route each one lives at
STATIC_PAGE_PATHS = {
    "contact": "/contact/",
    "privacyPolicy": "/privacy-policy/",
    "termsOfService": "/terms-of-service/",
}

# Dashed route keys accepted for static pages
STATIC_PAGE_KEY_ALIASES = {
    "privacy-policy": "privacyPolicy",
    "terms-of-service": "termsOfService",
}

# Slug used for each static page in the page override table
STATIC_PAGE_DB_SLUGS = {
    "contact": "contact",
    "privacyPolicy": "privacy-policy",
    "termsOfService": "terms-of-service",
}

# Legacy slugs an admin may have saved a page under
STATIC_PAGE_SLUG_ALIASES = {
    "privacy-policy": ["privacy", "privacy_policy", "privacyPolicy", "/privacy-policy"],
    "terms-of-service": ["terms", "tos", "terms_service", "termsOfService", "/terms-of-service"],
    "contact": ["contact-us", "support", "/contact"],
}
