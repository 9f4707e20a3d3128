"""Static TLD pricing lookup."""

from collections.abc import Mapping

from domain_verify.config import FALLBACK_TLD, TLD_PRICING
from domain_verify.models import Pricing


def get_tld(domain: str) -> str:
    """Extract the TLD (last label) from a domain name."""
    return domain.rsplit(".", 1)[-1].lower()


def get_domain_pricing(
    domain: str,
    table: Mapping[str, tuple[float, float]] = TLD_PRICING,
) -> Pricing:
    """Look up list pricing for a domain's TLD.

    Unknown TLDs get the .com price so every result carries pricing.
    """
    prices = table.get(get_tld(domain)) or table.get(FALLBACK_TLD) or TLD_PRICING[FALLBACK_TLD]
    registration, renewal = prices
    return Pricing(registration=registration, renewal=renewal)
