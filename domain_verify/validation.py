"""Domain string validation, applied before any verification layer runs."""

import re

DOMAIN_PATTERN = re.compile(
    r"^[a-zA-Z0-9][a-zA-Z0-9-]{0,61}[a-zA-Z0-9]?\.([a-zA-Z]{2,}|[a-zA-Z]{2,}\.[a-zA-Z]{2,})$"
)


class InvalidDomainError(ValueError):
    pass


def validate_domain(domain: str | None) -> str:
    """Return the stripped domain, or raise InvalidDomainError.

    Accepts a single root label under a TLD or a two-part suffix such as co.uk.
    """
    domain = (domain or "").strip()
    if not domain:
        raise InvalidDomainError("Domain is required")
    if not DOMAIN_PATTERN.match(domain):
        raise InvalidDomainError("Invalid domain format")
    return domain
