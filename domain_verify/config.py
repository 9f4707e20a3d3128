"""
domain-verify configuration

Timeouts, endpoints, the WHOIS credential and the static lookup tables live here.
Environment variables override defaults via VerifierConfig.from_env().
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from domain_verify.types import DnsBackend

DEFAULT_DOH_URL = "https://dns.google/resolve"
DEFAULT_WHOIS_URL = "https://www.whoisxmlapi.com/whoisserver/WhoisService"
USER_AGENT = "domain-verify/0.1 (progressive availability check)"

KNOWN_TAKEN_DOMAINS = frozenset({
    "google.com", "facebook.com", "amazon.com", "microsoft.com",
    "apple.com", "netflix.com", "twitter.com", "instagram.com",
    "youtube.com", "linkedin.com", "github.com", "stackoverflow.com",
    "reddit.com", "wikipedia.com",
})

# TLD -> (registration, renewal) in USD
TLD_PRICING: Mapping[str, tuple[float, float]] = MappingProxyType({
    "com": (12.99, 14.99),
    "net": (14.99, 16.99),
    "org": (13.99, 15.99),
    "co": (29.99, 29.99),
    "io": (39.99, 39.99),
    "app": (19.99, 19.99),
    "dev": (19.99, 19.99),
    "tech": (49.99, 49.99),
})
FALLBACK_TLD = "com"


@dataclass(frozen=True)
class VerifierConfig:
    """Immutable engine settings, built once and shared by every session."""
    whois_api_key: str = ""
    whois_url: str = DEFAULT_WHOIS_URL
    doh_url: str = DEFAULT_DOH_URL
    dns_backend: DnsBackend = "doh"
    user_agent: str = USER_AGENT

    # Seconds
    layer1_dns_timeout: float = 0.3
    layer2_dns_timeout: float = 0.6
    http_probe_timeout: float = 0.7
    whois_timeout: float = 15.0
    layer_delay: float = 0.1

    known_taken_domains: frozenset[str] = KNOWN_TAKEN_DOMAINS
    pricing_table: Mapping[str, tuple[float, float]] = field(default_factory=lambda: TLD_PRICING)

    def __post_init__(self):
        if self.dns_backend not in ("doh", "system"):
            raise ValueError(f"Unsupported DNS backend '{self.dns_backend}'. Use 'doh' or 'system'.")
        # Freeze caller-supplied tables too
        object.__setattr__(self, "known_taken_domains", frozenset(d.lower() for d in self.known_taken_domains))
        if not isinstance(self.pricing_table, MappingProxyType):
            object.__setattr__(self, "pricing_table", MappingProxyType(dict(self.pricing_table)))

    @property
    def whois_enabled(self) -> bool:
        return bool(self.whois_api_key)

    @classmethod
    def from_env(cls) -> "VerifierConfig":
        """Build a config from environment variables, falling back to defaults."""
        return cls(
            whois_api_key=os.getenv("WHOIS_API_KEY", ""),
            whois_url=os.getenv("WHOIS_API_URL", DEFAULT_WHOIS_URL),
            doh_url=os.getenv("DOH_URL", DEFAULT_DOH_URL),
            dns_backend=os.getenv("DNS_BACKEND", "doh").lower(),
            layer1_dns_timeout=float(os.getenv("LAYER1_DNS_TIMEOUT", "0.3")),
            layer2_dns_timeout=float(os.getenv("LAYER2_DNS_TIMEOUT", "0.6")),
            http_probe_timeout=float(os.getenv("HTTP_PROBE_TIMEOUT", "0.7")),
            whois_timeout=float(os.getenv("WHOIS_TIMEOUT", "15.0")),
            layer_delay=float(os.getenv("LAYER_DELAY", "0.1")),
        )
