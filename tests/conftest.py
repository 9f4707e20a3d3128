import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from domain_verify.config import VerifierConfig
from domain_verify.models import Availability, VerificationResult, utc_now
from domain_verify.classifier import classify
from domain_verify.pricing import get_domain_pricing
from domain_verify.verifier import ProgressiveVerifier


def _capture_console() -> tuple[Console, io.StringIO]:
    """Create a Console that writes to a StringIO for test capturing."""
    buf = io.StringIO()
    return Console(file=buf, force_terminal=True, width=160), buf


def make_resolver(records: dict[str, bool] | None = None, error: Exception | None = None) -> MagicMock:
    """Mock DnsResolver answering per record type ("A", "NS", "MX", "SOA")."""
    records = records or {}

    def has_records(domain, rdtype, timeout=5.0):
        if error is not None:
            raise error
        return records.get(rdtype, False)

    resolver = MagicMock()
    resolver.has_records = AsyncMock(side_effect=has_records)
    return resolver


def make_result(
    available: Availability,
    confidence: int,
    evidence: tuple[str, ...] = ("prior evidence",),
    layer: int = 1,
    domain: str = "example-brand.com",
    **extra,
) -> VerificationResult:
    return VerificationResult(
        domain=domain,
        layer=layer,
        available=available,
        confidence=confidence,
        status=classify(available, confidence, layer),
        evidence=evidence,
        pricing=get_domain_pricing(domain),
        completed_at=utc_now(),
        **extra,
    )


def queried_types(resolver: MagicMock) -> list[str]:
    return [c.args[1] for c in resolver.has_records.call_args_list]


@pytest.fixture
def config():
    """Config with WHOIS disabled and no inter-layer delay."""
    return VerifierConfig(whois_api_key="", layer_delay=0)


@pytest.fixture
def http_client():
    client = MagicMock()
    client.get = AsyncMock()
    client.head = AsyncMock()
    return client


@pytest.fixture
def make_verifier(config, http_client):
    def _make(resolver=None, cfg=None):
        return ProgressiveVerifier(cfg or config, resolver=resolver or make_resolver(), client=http_client)
    return _make
