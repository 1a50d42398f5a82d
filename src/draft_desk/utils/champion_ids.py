"""Champion identity normalization.

Every comparison of champion identities (exclusion sets, pool lookups,
catalog keys, external recommendations) uses normalize_champion_id so that
"Lee Sin", "leesin" and "LeeSin" are the same champion.
"""

import re
from typing import Iterable, Optional

_STRIP_PATTERN = re.compile(r"['\s.]")


def normalize_champion_id(value: Optional[str]) -> str:
    """Case-fold and strip apostrophes, whitespace and dots.

    Examples:
        >>> normalize_champion_id("Kai'Sa")
        'kaisa'
        >>> normalize_champion_id("Dr. Mundo")
        'drmundo'
    """
    if not value:
        return ""
    return _STRIP_PATTERN.sub("", value).casefold()


def normalize_id_set(values: Iterable[Optional[str]]) -> set[str]:
    """Normalize a collection of ids/names into a set, dropping empties."""
    return {cid for cid in (normalize_champion_id(v) for v in values) if cid}
