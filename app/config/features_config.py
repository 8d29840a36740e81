"""
Feature Configuration
Default per-house feature switches and labels, display order, and the
client route each feature opens. Houses override entries through
settings.features; anything they leave out falls back to these defaults.
"""

# Default feature configuration - used when house has no custom settings
DEFAULT_FEATURE_CONFIG = {
    "calendar": {"enabled": True, "label": "Reserve your bed"},
    "itinerary": {"enabled": False, "label": "Itinerary"},
    "weather": {"enabled": True, "label": "Pow report"},
    "broll": {"enabled": True, "label": "B-roll"},
    "bulletin": {"enabled": True, "label": "Bulletin board"},
    "expenses": {"enabled": True, "label": "Pay up"},
    "chat": {"enabled": False, "label": "Chat"},
    "members": {"enabled": True, "label": "Who's who"},
    "account": {"enabled": True, "label": "About you"},
}

# Feature to client route mapping (used as deep-link targets)
FEATURE_ROUTES = {
    "calendar": "/(tabs)/calendar",
    "itinerary": "/(tabs)/itinerary",
    "weather": "/(tabs)/weather",
    "broll": "/(tabs)/broll",
    "bulletin": "/(tabs)/bulletin",
    "expenses": "/(tabs)/expenses",
    "chat": "/(tabs)/chat",
    "members": "/members",
    "account": "/(tabs)/account",
}

# Order for display in settings and navigation
FEATURE_ORDER = [
    "calendar",
    "itinerary",
    "weather",
    "broll",
    "bulletin",
    "expenses",
    "chat",
    "members",
    "account",
]
