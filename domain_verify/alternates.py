"""Unchecked alternate-TLD suggestions for a queried domain."""

import re

from domain_verify.models import Alternate

KNOWN_TLD_SUFFIX = re.compile(r"\.(com|net|org|co|io|app|dev|tech)$")
ALTERNATE_TLD_SCORES = {"net": 95, "org": 90, "io": 85, "co": 80}
DEFAULT_SCORE = 75
MAX_ALTERNATES = 4


def suggest_alternates(domain: str, limit: int = MAX_ALTERNATES) -> list[Alternate]:
    """Suggest the same name under other popular TLDs, best-scored first.

    Alternates are not verified; callers check them on demand.
    """
    base = KNOWN_TLD_SUFFIX.sub("", domain)
    alternates = [
        Alternate(domain=f"{base}.{tld}", score=ALTERNATE_TLD_SCORES.get(tld, DEFAULT_SCORE))
        for tld in ALTERNATE_TLD_SCORES
        if f"{base}.{tld}" != domain
    ]
    return sorted(alternates, key=lambda a: -a.score)[:limit]
