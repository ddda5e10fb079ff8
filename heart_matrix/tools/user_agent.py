"""
User-Agent Classification

Ordered substring rules per category. Within a category the first
matching rule wins; categories are evaluated independently.
"""

from heart_matrix.models.submission import ClientMetadata

Rule = tuple[str, str]

DEVICE_RULES: tuple[Rule, ...] = (
    ("iPhone", "iPhone"),
    ("Android", "Android"),
    ("Windows", "Windows PC"),
    ("Macintosh", "Mac"),
)

OS_RULES: tuple[Rule, ...] = (
    ("iPhone OS", "iOS"),
    ("Android", "Android"),
    ("Windows NT", "Windows"),
    ("Mac OS X", "macOS"),
)

# Chrome before Safari: Chrome user agents also contain "Safari"
BROWSER_RULES: tuple[Rule, ...] = (
    ("Chrome", "Chrome"),
    ("Safari", "Safari"),
    ("Firefox", "Firefox"),
)


def match_rule(user_agent: str, rules: tuple[Rule, ...], default: str) -> str:
    """Return the value of the first rule whose substring occurs in user_agent."""
    for needle, value in rules:
        if needle in user_agent:
            return value
    return default


def classify_user_agent(user_agent: str | None) -> ClientMetadata:
    """
    Derive device, OS and browser from a user-agent string.

    Args:
        user_agent: Raw User-Agent header value (None treated as empty)

    Returns:
        ClientMetadata with "Unknown ..." for categories that match no rule
    """
    ua = user_agent or ""
    return ClientMetadata(
        device=match_rule(ua, DEVICE_RULES, "Unknown device"),
        os=match_rule(ua, OS_RULES, "Unknown OS"),
        browser=match_rule(ua, BROWSER_RULES, "Unknown browser"),
    )
