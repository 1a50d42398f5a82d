"""Centralized role normalization utility.

Every component that compares roles goes through this module. The canonical
format is lowercase: top, jungle, mid, bot, support.
"""

from typing import Optional

# Canonical roles - the standard format used throughout the application
CANONICAL_ROLES = frozenset({"top", "jungle", "mid", "bot", "support"})

# Role ordering for rosters and display; roster slot i plays ROLE_ORDER[i]
ROLE_ORDER = ["top", "jungle", "mid", "bot", "support"]

# Mapping from any known role format (compared lowercase) to canonical
ROLE_ALIASES: dict[str, str] = {
    # Top lane variations
    "top": "top",
    "top laner": "top",
    "toplane": "top",
    "topside": "top",

    # Jungle variations
    "jungle": "jungle",
    "jungler": "jungle",
    "jng": "jungle",
    "jgl": "jungle",
    "jg": "jungle",

    # Mid lane variations
    "mid": "mid",
    "middle": "mid",
    "mid laner": "mid",
    "midlane": "mid",

    # Bot/ADC variations - all normalize to "bot"
    "bot": "bot",
    "adc": "bot",
    "bottom": "bot",
    "bot laner": "bot",
    "ad carry": "bot",
    "marksman": "bot",

    # Support variations
    "support": "support",
    "sup": "support",
    "supp": "support",
}


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Normalize a role string to canonical lowercase format.

    Args:
        role: Role string in any known format (e.g., "JGL", "jungle", "ADC", "bot")

    Returns:
        Normalized role string (top/jungle/mid/bot/support) or None if invalid/None

    Examples:
        >>> normalize_role("JGL")
        'jungle'
        >>> normalize_role("ADC")
        'bot'
        >>> normalize_role(None)
    """
    if role is None:
        return None
    return ROLE_ALIASES.get(role.strip().lower())


def unfilled_roles(filled: list[str]) -> list[str]:
    """Roles not yet filled, in standard order."""
    filled_set = {normalize_role(r) for r in filled}
    return [role for role in ROLE_ORDER if role not in filled_set]
